"""
Runtime configuration for the evaluation engine.

This module centralizes environment-driven configuration: which checks a
run evaluates by default and the few tunables shared by providers and
checks.

Configuration is read-only at runtime and must not make a check's
verdict depend on anything other than its declared artifacts.
"""

from __future__ import annotations

import os
from typing import Tuple

from pydantic import BaseModel, Field, field_validator, ValidationInfo


def _split_names(raw: str | None) -> Tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class SitecheckConfig(BaseModel):
    """
    Runtime configuration for the evaluation engine.

    Configuration is environment-driven and read-only at runtime.
    """

    # ------------------------------------------------------------------
    # Check selection
    # ------------------------------------------------------------------

    ONLY_CHECKS: Tuple[str, ...] = Field(
        default_factory=tuple,
        description=(
            "Evaluate only these checks when a run does not name its own "
            "subset. Empty means every registered check."
        ),
    )

    SKIP_CHECKS: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Checks excluded from the default selection",
    )

    # ------------------------------------------------------------------
    # Derived artifacts
    # ------------------------------------------------------------------

    DEFAULT_PASS_NAME: str = Field(
        "defaultPass",
        min_length=1,
        description="Gather pass whose devtools log feeds network-record derivation",
    )

    MANIFEST_SHORT_NAME_MAX_LENGTH: int = Field(
        12,
        ge=1,
        description="Longest manifest short_name not truncated on a home screen",
    )

    # ------------------------------------------------------------------
    # Presentation-adjacent limits
    # ------------------------------------------------------------------

    ELIDED_URL_MAX_LENGTH: int = Field(
        100,
        ge=1,
        description="Maximum length of a data: URI reported in findings",
    )

    # ------------------------------------------------------------------
    # Validators (Pydantic v2)
    # ------------------------------------------------------------------

    @field_validator("ONLY_CHECKS", "SKIP_CHECKS")
    @classmethod
    def names_not_empty(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not name.strip() for name in v):
            raise ValueError("Check names must be non-empty strings")
        return v

    @field_validator("SKIP_CHECKS")
    @classmethod
    def only_and_skip_disjoint(
        cls, v: Tuple[str, ...], info: ValidationInfo
    ) -> Tuple[str, ...]:
        overlap = set(v) & set(info.data.get("ONLY_CHECKS") or ())
        if overlap:
            raise ValueError(
                "ONLY_CHECKS and SKIP_CHECKS overlap: "
                f"{sorted(overlap)}"
            )
        return v

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "SitecheckConfig":
        """
        Load configuration from environment variables.

        All values are parsed once at startup and must remain immutable.
        """
        return cls(
            ONLY_CHECKS=_split_names(os.getenv("SITECHECK_ONLY_CHECKS")),
            SKIP_CHECKS=_split_names(os.getenv("SITECHECK_SKIP_CHECKS")),
            DEFAULT_PASS_NAME=os.getenv(
                "SITECHECK_DEFAULT_PASS_NAME", "defaultPass"
            ),
            MANIFEST_SHORT_NAME_MAX_LENGTH=int(
                os.getenv("SITECHECK_MANIFEST_SHORT_NAME_MAX_LENGTH", "12")
            ),
            ELIDED_URL_MAX_LENGTH=int(
                os.getenv("SITECHECK_ELIDED_URL_MAX_LENGTH", "100")
            ),
        )

    model_config = {
        "frozen": True,
    }
