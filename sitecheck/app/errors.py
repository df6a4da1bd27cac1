"""
Error taxonomy for the evaluation engine.

Every error below except ReportAssemblyError and UnknownCheckError is
contained per check by the EvaluationRunner and surfaced as an ERRORED
outcome. Not-applicable is NOT an error; it is a CheckResult with
passed=None.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional


class SitecheckError(Exception):
    """Base class for all engine errors."""


class MissingArtifactError(SitecheckError):
    """
    A required artifact is absent from the store and has no derivation
    path, or the collector recorded a failure in its place.
    """

    def __init__(self, artifact: str, reason: Optional[str] = None) -> None:
        self.artifact = artifact
        self.reason = reason

        message = f"Required artifact '{artifact}' is missing"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DerivationError(SitecheckError):
    """
    A derived-artifact provider could not produce a value.

    Propagates to every caller awaiting the same derivation.
    """

    def __init__(
        self,
        artifact: str,
        reason: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.artifact = artifact
        self.reason = reason
        self.params = dict(params or {})

        signature = ""
        if self.params:
            signature = "(" + ", ".join(
                f"{k}={v!r}" for k, v in sorted(self.params.items())
            ) + ")"
        super().__init__(
            f"Derivation of '{artifact}{signature}' failed: {reason}"
        )


class CheckEvaluationError(SitecheckError):
    """
    A check's own evaluation logic raised, or returned something that is
    not a CheckResult.
    """

    def __init__(self, check_name: str, cause: str) -> None:
        self.check_name = check_name
        self.cause = cause
        super().__init__(f"Check '{check_name}' failed to evaluate: {cause}")


class UnknownCheckError(SitecheckError, KeyError):
    """Requested check names are not registered."""

    def __init__(self, names: Iterable[str]) -> None:
        self.names = sorted(names)
        super().__init__(f"Unknown check(s): {', '.join(self.names)}")

    def __str__(self) -> str:
        return self.args[0]


class ReportAssemblyError(SitecheckError):
    """
    The aggregated report could not be assembled.

    This is the only error that is fatal to a run.
    """
