"""
Check contract.

Every check is an opaque unit of logic exposing:
- meta():       a pure CheckDescriptor, obtainable without a store
- evaluate():   a CheckResult (or an awaitable of one) for a store

Checks are registered by name in a CheckRegistry; nothing requires them
to share a base class.
"""

from __future__ import annotations

from typing import Awaitable, List, Optional, Protocol, Sequence, Union

from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult
from sitecheck.app.schemas.findings import Finding, TableDetails, TableHeading


class Check(Protocol):
    """
    Interface for a single check.

    A check:
    - MUST NOT mutate artifacts
    - MUST derive `passed` solely from its declared required artifacts
    - MUST NOT raise for absent optional data; optional lookups go
      through ArtifactStore.get_optional
    """

    def meta(self) -> CheckDescriptor:
        ...

    def evaluate(
        self,
        store: ArtifactStore,
    ) -> Union[CheckResult, Awaitable[CheckResult]]:
        """
        Evaluate the rule against the run's artifacts.

        Only invoked after every required artifact resolved.
        """
        ...


def offending_items_result(
    findings: Sequence[Finding],
    headings: List[TableHeading],
    *,
    display_value: Optional[str] = None,
) -> CheckResult:
    """
    Result for a rule of the form "the offending collection is empty".

    passed is True exactly when `findings` is empty. Otherwise every
    finding is attached, in order, to both `details` and
    `raw_extended_info`.
    """
    findings = list(findings)

    if not findings:
        return CheckResult(passed=True, display_value=display_value)

    return CheckResult(
        passed=False,
        display_value=display_value,
        details=TableDetails.from_findings(headings, findings),
        raw_extended_info=findings,
    )
