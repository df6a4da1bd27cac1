"""
EvaluationReport schema.

Defines the aggregated report produced by one evaluation run. It is the
sole object handed to rendering collaborators.

The report captures, per requested check:
- the check's descriptor (human metadata)
- its outcome class
- its CheckResult, or the reason it could not be evaluated
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic import ConfigDict

from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult


# ---------------------------------------------------------------------------
# Enumerations (FROZEN CONTRACTS)
# ---------------------------------------------------------------------------

class OutcomeClass(str, Enum):
    """
    Outcome of one check in the aggregate.

    ERRORED is never collapsed into FAILED: a failed check was evaluated
    and its rule was violated, an errored check could not be evaluated.
    """

    PASSED = "passed"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"
    INFORMATIONAL = "informational"
    ERRORED = "errored"


class CheckState(str, Enum):
    """
    Per-check, per-run execution state.

    PENDING -> RESOLVING_ARTIFACTS -> RUNNING -> terminal
    PENDING -> RESOLVING_ARTIFACTS -> ERRORED
    """

    PENDING = "pending"
    RESOLVING_ARTIFACTS = "resolving_artifacts"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"
    INFORMATIONAL = "informational"
    ERRORED = "errored"

    @property
    def terminal(self) -> bool:
        return self not in {
            CheckState.PENDING,
            CheckState.RESOLVING_ARTIFACTS,
            CheckState.RUNNING,
        }


# ---------------------------------------------------------------------------
# Per-check outcome
# ---------------------------------------------------------------------------

class CheckError(BaseModel):
    """Reason a check could not be evaluated."""

    error_type: str = Field(
        ...,
        description=(
            "Classified error: MissingArtifactError, DerivationError "
            "or CheckEvaluationError"
        ),
    )

    message: str = Field(..., description="Diagnostic message")

    artifacts: List[str] = Field(
        default_factory=list,
        description="Artifact names that failed to resolve, if any",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


class CheckOutcome(BaseModel):
    """Descriptor, outcome class and result of one check."""

    name: str
    descriptor: CheckDescriptor
    outcome: OutcomeClass
    result: Optional[CheckResult] = None
    error: Optional[CheckError] = None

    @model_validator(mode="after")
    def enforce_outcome_invariants(self):
        """
        - ERRORED carries an error and no result
        - every other class carries a result and no error
        - the outcome class agrees with result.passed
        """
        if self.name != self.descriptor.name:
            raise ValueError(
                f"Outcome name '{self.name}' does not match descriptor "
                f"name '{self.descriptor.name}'"
            )

        if self.outcome is OutcomeClass.ERRORED:
            if self.error is None or self.result is not None:
                raise ValueError(
                    "ERRORED outcomes must carry an error and no result"
                )
            return self

        if self.result is None or self.error is not None:
            raise ValueError(
                f"{self.outcome.value} outcomes must carry a result and no error"
            )

        passed = self.result.passed
        expected = {
            OutcomeClass.PASSED: passed is True,
            OutcomeClass.FAILED: passed is False,
            OutcomeClass.NOT_APPLICABLE: passed is None,
            OutcomeClass.INFORMATIONAL: passed is not None,
        }[self.outcome]

        if not expected:
            raise ValueError(
                f"Outcome {self.outcome.value} is inconsistent with "
                f"passed={passed!r}"
            )

        return self

    model_config = ConfigDict(frozen=True, extra="forbid")


class ReportSummary(BaseModel):
    """Outcome counts across the report."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    not_applicable: int = 0
    informational: int = 0
    errored: int = 0

    model_config = ConfigDict(frozen=True, extra="forbid")

    @classmethod
    def from_outcomes(cls, outcomes: List[CheckOutcome]) -> "ReportSummary":
        counts = {outcome_class.value: 0 for outcome_class in OutcomeClass}
        for outcome in outcomes:
            counts[outcome.outcome.value] += 1
        return cls(total=len(outcomes), **counts)


# ---------------------------------------------------------------------------
# Top-Level Report (PUBLIC, FROZEN CONTRACT)
# ---------------------------------------------------------------------------

class EvaluationReport(BaseModel):
    """
    Aggregated report of one evaluation run.

    Every requested check appears exactly once, keyed by name, in the
    order it was requested.
    """

    schema_version: str = Field(
        "1.0",
        description="EvaluationReport schema version",
    )

    run_id: str = Field(
        ...,
        description="Unique identifier for this evaluation run",
    )

    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when the report was assembled (UTC)",
    )

    checks: Dict[str, CheckOutcome] = Field(
        default_factory=dict,
        description="Per-check outcomes keyed by check name",
    )

    summary: ReportSummary = Field(
        default_factory=ReportSummary,
        description="Outcome counts",
    )

    @model_validator(mode="after")
    def enforce_report_consistency(self):
        for name, outcome in self.checks.items():
            if name != outcome.name:
                raise ValueError(
                    f"Report key '{name}' does not match outcome '{outcome.name}'"
                )

        if self.summary != ReportSummary.from_outcomes(list(self.checks.values())):
            raise ValueError("Report summary does not match check outcomes")

        return self

    def by_outcome(self, outcome: OutcomeClass) -> List[CheckOutcome]:
        return [o for o in self.checks.values() if o.outcome is outcome]

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )
