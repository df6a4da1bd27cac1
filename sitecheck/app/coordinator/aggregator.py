"""
Result aggregator.

Turns the per-check outcomes of one run into the EvaluationReport.

IMPORTANT:
The aggregator does not interpret results. It only enforces that every
requested check appears exactly once and computes the summary counts.
A violation of that contract is a defect in the runner and is fatal to
the run (ReportAssemblyError).
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from pydantic import ValidationError

from sitecheck.app.errors import ReportAssemblyError
from sitecheck.app.schemas.report import (
    CheckOutcome,
    EvaluationReport,
    ReportSummary,
)

logger = logging.getLogger(__name__)


class ResultAggregator:
    def assemble(
        self,
        *,
        run_id: str,
        requested: Sequence[str],
        outcomes: Iterable[CheckOutcome],
    ) -> EvaluationReport:
        """
        Build the report, keyed by check name in requested order.

        Raises ReportAssemblyError if any requested check is missing, any
        outcome is duplicated, or an outcome was not requested.
        """
        by_name: Dict[str, CheckOutcome] = {}
        duplicates: List[str] = []

        for outcome in outcomes:
            if outcome.name in by_name:
                duplicates.append(outcome.name)
            by_name[outcome.name] = outcome

        if duplicates:
            raise ReportAssemblyError(
                f"Duplicate outcomes for check(s): {sorted(set(duplicates))}"
            )

        if len(set(requested)) != len(requested):
            raise ReportAssemblyError(
                f"Requested check list contains duplicates: {list(requested)}"
            )

        missing = [name for name in requested if name not in by_name]
        if missing:
            raise ReportAssemblyError(f"No outcome for check(s): {missing}")

        unexpected = sorted(set(by_name) - set(requested))
        if unexpected:
            raise ReportAssemblyError(
                f"Outcomes for unrequested check(s): {unexpected}"
            )

        ordered = [by_name[name] for name in requested]

        try:
            report = EvaluationReport(
                run_id=run_id,
                checks={outcome.name: outcome for outcome in ordered},
                summary=ReportSummary.from_outcomes(ordered),
            )
        except ValidationError as exc:
            raise ReportAssemblyError(f"Invalid report: {exc}") from exc

        logger.debug(
            "Assembled report %s: %s",
            run_id,
            report.summary.model_dump(),
        )
        return report
