"""
Evaluation runner.

IMPORTANT:
The runner is a DUMB AUTHORITY.

It MUST NOT:
- interpret artifacts
- inspect check results beyond their verdict
- let one check's failure affect another check

Its sole responsibilities are:
- selecting checks
- driving each check through its state machine
- containing per-check errors
- handing outcomes to the ResultAggregator

Per-check state machine:

    PENDING -> RESOLVING_ARTIFACTS -> RUNNING -> PASSED | FAILED
                                              | NOT_APPLICABLE
                                              | INFORMATIONAL
                                              | ERRORED
    PENDING -> RESOLVING_ARTIFACTS -> ERRORED

A check whose required artifacts do not all resolve is never evaluated.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
from uuid import uuid4

from sitecheck.app.artifacts.derivation import (
    DerivationCache,
    DerivedArtifactProvider,
    build_provider_index,
)
from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.checks.base import Check
from sitecheck.app.checks.registry import CheckRegistry
from sitecheck.app.config import SitecheckConfig
from sitecheck.app.coordinator.aggregator import ResultAggregator
from sitecheck.app.errors import (
    CheckEvaluationError,
    DerivationError,
    MissingArtifactError,
)
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult
from sitecheck.app.schemas.report import (
    CheckError,
    CheckOutcome,
    CheckState,
    EvaluationReport,
    OutcomeClass,
)

# Events (observational only)
from sitecheck.app.events import (
    EvaluationEvent,
    EvaluationEventType,
    EvaluationEventEmitter,
    NullEventEmitter,
    emit_safely,
)

logger = logging.getLogger(__name__)

ArtifactFailure = Tuple[str, Union[MissingArtifactError, DerivationError]]


class EvaluationRunner:
    """
    Runs a selection of registered checks against one artifact set.
    """

    def __init__(
        self,
        registry: CheckRegistry,
        providers: Iterable[DerivedArtifactProvider] = (),
        config: Optional[SitecheckConfig] = None,
        aggregator: Optional[ResultAggregator] = None,
    ) -> None:
        """
        Direct constructor.

        Intended for tests and explicit wiring. config=None means the
        default selection is every registered check.
        """
        self._registry = registry
        self._providers = build_provider_index(providers)
        self._config = config
        self._aggregator = aggregator or ResultAggregator()

    # ------------------------------------------------------------------
    # Integration constructor (composition root)
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: SitecheckConfig) -> "EvaluationRunner":
        """
        Construct a runner with the built-in checks and providers.
        """
        from sitecheck.app.coordinator.assembler import (
            build_default_providers,
            build_default_registry,
        )

        return cls(
            registry=build_default_registry(config),
            providers=build_default_providers(config),
            config=config,
        )

    @property
    def registry(self) -> CheckRegistry:
        return self._registry

    @property
    def providers(self) -> Mapping[str, DerivedArtifactProvider]:
        return dict(self._providers)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self,
        artifacts: Union[Mapping[str, Any], ArtifactStore],
        *,
        check_names: Optional[Sequence[str]] = None,
        run_id: Optional[str] = None,
        emitter: Optional[EvaluationEventEmitter] = None,
    ) -> EvaluationReport:
        """
        Evaluate the selected checks and assemble the report.

        A raw mapping gets a fresh store and derivation cache scoped to
        this run. A prepared ArtifactStore is used as-is, including its
        derivation cache, when it already knows every provider of this
        runner. Otherwise its raw artifacts are rebound to a run cache
        holding both provider sets.

        Raises:
            UnknownCheckError: a requested name is not registered
                (raised before anything runs)
            ReportAssemblyError: the report could not be assembled
        """
        checks = self._select(check_names)
        requested = [check.meta().name for check in checks]

        run_id = run_id or str(uuid4())
        emitter = emitter or NullEventEmitter()
        store = self._store_for(artifacts, run_id=run_id, emitter=emitter)

        logger.info("Run %s started: %d check(s)", run_id, len(requested))
        await self._emit(
            emitter,
            run_id,
            EvaluationEventType.RUN_STARTED,
            {"checks": requested},
        )

        try:
            outcomes = await asyncio.gather(
                *(
                    self._run_check(check, store, run_id=run_id, emitter=emitter)
                    for check in checks
                )
            )

            report = self._aggregator.assemble(
                run_id=run_id,
                requested=requested,
                outcomes=outcomes,
            )

        except Exception as exc:
            logger.error("Run %s failed: %s", run_id, exc)
            await self._emit(
                emitter,
                run_id,
                EvaluationEventType.RUN_FAILED,
                {
                    "exception_type": type(exc).__name__,
                    "message": str(exc),
                },
            )
            raise

        summary = report.summary.model_dump()

        await self._emit(
            emitter,
            run_id,
            EvaluationEventType.REPORT_READY,
            {"summary": summary},
        )

        logger.info("Run %s completed: %s", run_id, summary)
        await self._emit(
            emitter,
            run_id,
            EvaluationEventType.RUN_COMPLETED,
            {"summary": summary},
        )

        return report

    # ------------------------------------------------------------------
    # Selection and store
    # ------------------------------------------------------------------

    def _select(self, check_names: Optional[Sequence[str]]) -> List[Check]:
        if check_names is not None:
            return self._registry.select(check_names)

        if self._config is None:
            return self._registry.select()

        return self._registry.select(
            self._config.ONLY_CHECKS or None,
            skip=self._config.SKIP_CHECKS,
        )

    def _store_for(
        self,
        artifacts: Union[Mapping[str, Any], ArtifactStore],
        *,
        run_id: str,
        emitter: EvaluationEventEmitter,
    ) -> ArtifactStore:
        if isinstance(artifacts, ArtifactStore):
            derivations = artifacts.derivations
            missing = [
                name for name in self._providers
                if not derivations.has_provider(name)
            ]
            if not missing:
                return artifacts

            # The store's own providers win over the runner's.
            logger.debug("Adding providers to prepared store: %s", missing)
            providers = {
                **self._providers,
                **{
                    name: derivations.provider(name)
                    for name in derivations.provider_names
                },
            }
            cache = DerivationCache(providers, run_id=run_id, emitter=emitter)
            return ArtifactStore(artifacts.raw, derivations=cache)

        cache = DerivationCache(self._providers, run_id=run_id, emitter=emitter)
        return ArtifactStore(artifacts, derivations=cache)

    # ------------------------------------------------------------------
    # Per-check execution
    # ------------------------------------------------------------------

    async def _run_check(
        self,
        check: Check,
        store: ArtifactStore,
        *,
        run_id: str,
        emitter: EvaluationEventEmitter,
    ) -> CheckOutcome:
        descriptor = check.meta()
        name = descriptor.name

        await self._transition(emitter, run_id, name, CheckState.PENDING)
        await self._transition(
            emitter, run_id, name, CheckState.RESOLVING_ARTIFACTS
        )

        failures = await self._resolve_required(store, descriptor)
        if failures:
            outcome = _artifact_failure_outcome(descriptor, failures)
            logger.warning(
                "Check %s errored: %s", name, outcome.error.message
            )
            return await self._finish(emitter, run_id, outcome)

        await self._transition(emitter, run_id, name, CheckState.RUNNING)

        try:
            result = check.evaluate(store)
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            logger.exception("Check %s raised during evaluation", name)
            error = CheckEvaluationError(name, f"{type(exc).__name__}: {exc}")
            return await self._finish(
                emitter, run_id, _evaluation_error_outcome(descriptor, error)
            )

        if not isinstance(result, CheckResult):
            error = CheckEvaluationError(
                name,
                f"returned {type(result).__name__}, expected CheckResult",
            )
            logger.warning("Check %s errored: %s", name, error)
            return await self._finish(
                emitter, run_id, _evaluation_error_outcome(descriptor, error)
            )

        outcome = CheckOutcome(
            name=name,
            descriptor=descriptor,
            outcome=classify(descriptor, result),
            result=result,
        )
        return await self._finish(emitter, run_id, outcome)

    async def _resolve_required(
        self,
        store: ArtifactStore,
        descriptor: CheckDescriptor,
    ) -> List[ArtifactFailure]:
        """
        Resolve every required artifact concurrently, each derived one
        with the parameters the descriptor declares for it.

        Returns the failed artifacts in declaration order. Unexpected
        faults are recorded as derivation failures of that artifact.
        """
        required = descriptor.required_artifacts
        resolved = await asyncio.gather(
            *(
                store.resolve(
                    artifact, **descriptor.artifact_params.get(artifact, {})
                )
                for artifact in required
            ),
            return_exceptions=True,
        )

        failures: List[ArtifactFailure] = []
        for artifact, value in zip(required, resolved):
            if isinstance(value, (MissingArtifactError, DerivationError)):
                failures.append((artifact, value))
            elif isinstance(value, Exception):
                logger.error(
                    "Resolving %s for check %s raised %s: %s",
                    artifact,
                    descriptor.name,
                    type(value).__name__,
                    value,
                )
                error = DerivationError(
                    artifact, reason=f"{type(value).__name__}: {value}"
                )
                error.__cause__ = value
                failures.append((artifact, error))
            elif isinstance(value, BaseException):
                raise value
        return failures

    async def _finish(
        self,
        emitter: EvaluationEventEmitter,
        run_id: str,
        outcome: CheckOutcome,
    ) -> CheckOutcome:
        await self._transition(
            emitter,
            run_id,
            outcome.name,
            CheckState(outcome.outcome.value),
        )
        return outcome

    async def _transition(
        self,
        emitter: EvaluationEventEmitter,
        run_id: str,
        name: str,
        state: CheckState,
    ) -> None:
        logger.debug("Check %s -> %s", name, state.value)
        await self._emit(
            emitter,
            run_id,
            EvaluationEventType.CHECK_STATE_CHANGED,
            {"check": name, "state": state.value},
        )

    async def _emit(
        self,
        emitter: EvaluationEventEmitter,
        run_id: str,
        event_type: EvaluationEventType,
        details: Optional[dict] = None,
    ) -> None:
        await emit_safely(
            emitter,
            EvaluationEvent(
                run_id=run_id,
                event_type=event_type,
                details=details,
            ),
        )


# ---------------------------------------------------------------------------
# Outcome construction
# ---------------------------------------------------------------------------

def classify(descriptor: CheckDescriptor, result: CheckResult) -> OutcomeClass:
    """
    Outcome class of an evaluated check.

    Not-applicable takes precedence over informative.
    """
    if result.passed is None:
        return OutcomeClass.NOT_APPLICABLE
    if descriptor.informative:
        return OutcomeClass.INFORMATIONAL
    return OutcomeClass.PASSED if result.passed else OutcomeClass.FAILED


def _artifact_failure_outcome(
    descriptor: CheckDescriptor,
    failures: List[ArtifactFailure],
) -> CheckOutcome:
    return CheckOutcome(
        name=descriptor.name,
        descriptor=descriptor,
        outcome=OutcomeClass.ERRORED,
        error=CheckError(
            error_type=type(failures[0][1]).__name__,
            message="; ".join(str(exc) for _, exc in failures),
            artifacts=[artifact for artifact, _ in failures],
        ),
    )


def _evaluation_error_outcome(
    descriptor: CheckDescriptor,
    error: CheckEvaluationError,
) -> CheckOutcome:
    return CheckOutcome(
        name=descriptor.name,
        descriptor=descriptor,
        outcome=OutcomeClass.ERRORED,
        error=CheckError(
            error_type=type(error).__name__,
            message=str(error),
        ),
    )
