"""
Check descriptor and check result schemas.

The descriptor is the static contract of a check (identity, human
metadata, declared artifact dependencies). The result is the normalized
output of a single evaluation.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ConfigDict

from sitecheck.app.schemas.findings import Finding, TableDetails


class CheckDescriptor(BaseModel):
    """
    Immutable metadata of a check.

    Used for documentation, reporting, and pre-flight validation of
    required artifacts. Must be obtainable without an Artifact Store.
    """

    name: str = Field(
        ...,
        min_length=1,
        description="Unique check identifier (e.g. 'is-on-https')",
    )

    description: str = Field(
        ...,
        description="Short description shown when the check passes",
    )

    failure_description: str = Field(
        ...,
        description="Short description shown when the check fails",
    )

    help_text: str = Field(
        "",
        description="Longer explanation of the rule and how to fix it",
    )

    required_artifacts: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Raw or derived artifact names that must resolve before evaluation",
    )

    informative: bool = Field(
        False,
        description="Check reports information rather than a pass/fail verdict",
    )

    artifact_params: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict,
        description=(
            "Parameters a derived requirement is resolved with, keyed by "
            "artifact name. Requirements not listed use the provider defaults."
        ),
    )

    @field_validator("required_artifacts")
    @classmethod
    def artifact_names_unique(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not name for name in v):
            raise ValueError("required_artifacts must not contain empty names")
        if len(set(v)) != len(v):
            raise ValueError(f"required_artifacts contains duplicates: {list(v)}")
        return v

    @model_validator(mode="after")
    def params_name_required_artifacts(self):
        unknown = sorted(set(self.artifact_params) - set(self.required_artifacts))
        if unknown:
            raise ValueError(
                f"artifact_params names artifacts that are not required: {unknown}"
            )
        return self

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )


class CheckResult(BaseModel):
    """
    Normalized output of one check evaluation.

    passed:
        True / False for an evaluated rule, None when the rule does not
        apply to this subject.
    """

    passed: Optional[bool] = Field(
        ...,
        description="Verdict, or None when the check is not applicable",
    )

    display_value: Optional[str] = Field(
        None,
        description="Short human string (e.g. a count)",
    )

    details: Optional[TableDetails] = Field(
        None,
        description="Structured payload for rendering",
    )

    debug_string: Optional[str] = Field(
        None,
        description="Free-text diagnostic for failure triage",
    )

    raw_extended_info: Optional[List[Finding]] = Field(
        None,
        description="Full finding list for programmatic consumers",
    )

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    @property
    def not_applicable(self) -> bool:
        return self.passed is None

    @classmethod
    def inapplicable(cls, reason: Optional[str] = None) -> "CheckResult":
        """Result for a rule that does not apply to this subject."""
        return cls(passed=None, debug_string=reason)
