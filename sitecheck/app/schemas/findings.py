"""
Standardized finding schema.

A Finding is one concrete offending occurrence surfaced by a check
(an insecure request, a blocked password input, a console warning).
Findings feed both the tabular `details` payload and the
`raw_extended_info` list of a CheckResult.

This schema is:
- immutable once constructed
- location-preserving (the originating URL is never rewritten)
- renderer-agnostic
"""

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic import ConfigDict


# ---------------------------------------------------------------------------
# Canonical Finding Object (PUBLIC, FROZEN)
# ---------------------------------------------------------------------------


class Finding(BaseModel):
    """
    One offending occurrence.

    Findings are descriptive, not prescriptive.
    """

    location: Optional[str] = Field(
        None,
        description=(
            "Source location of the occurrence (a URL), when it has one"
        ),
    )

    label: str = Field(
        ...,
        description="Short human-readable reason the occurrence violates the rule",
    )

    text: Optional[str] = Field(
        None,
        description=(
            "Raw text of the occurrence: the matched message, or the "
            "markup snippet of an offending element"
        ),
    )

    line_number: Optional[int] = Field(
        None,
        description="Line number within `location`, when known",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


# ---------------------------------------------------------------------------
# Tabular details (renderer hand-off)
# ---------------------------------------------------------------------------


class TableHeading(BaseModel):
    """Column definition for TableDetails."""

    key: str = Field(..., description="Finding attribute rendered in this column")
    item_type: Literal["url", "text", "code", "numeric"] = Field(
        "text",
        description="Rendering hint for the column values",
    )
    text: str = Field(..., description="Column header text")

    model_config = ConfigDict(frozen=True, extra="forbid")


class TableDetails(BaseModel):
    """
    Tabular payload attached to a CheckResult.

    Each row is the projection of one Finding onto the heading keys,
    so rows and findings correspond 1:1 and in the same order.
    """

    type: Literal["table"] = "table"
    headings: Tuple[TableHeading, ...] = Field(default_factory=tuple)
    items: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_findings(
        cls,
        headings: List[TableHeading],
        findings: List[Finding],
    ) -> "TableDetails":
        keys = [heading.key for heading in headings]
        return cls(
            headings=tuple(headings),
            items=[
                {key: getattr(finding, key) for key in keys}
                for finding in findings
            ],
        )
