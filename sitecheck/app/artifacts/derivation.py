"""
Derived artifact providers and the per-run derivation cache.

A provider is a named, asynchronous, side-effect-free function of raw
artifacts (and possibly other derived artifacts). The cache is the single
coordination point that guarantees each (name, parameters) pair is
computed at most once per run, however many checks request it and
however concurrently they do so.

IMPORTANT:
- The first requester schedules the computation as an asyncio task.
  Every later or concurrent requester awaits that same task.
- Success and failure are both shared: all callers receive the same
  value or the same DerivationError.
- Waiters are shielded, so cancelling one waiter never cancels the
  shared computation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    Tuple,
)

from sitecheck.app.errors import DerivationError, MissingArtifactError
from sitecheck.app.events import (
    EvaluationEvent,
    EvaluationEventType,
    EvaluationEventEmitter,
    NullEventEmitter,
    emit_safely,
)

if TYPE_CHECKING:
    from sitecheck.app.artifacts.store import ArtifactStore

logger = logging.getLogger(__name__)


CacheKey = Tuple[str, Tuple[Tuple[str, Any], ...]]


class DerivedArtifactProvider(Protocol):
    """
    Interface for a derived-artifact provider.

    A provider:
    - is referentially transparent given the same raw inputs
    - MUST NOT write back into the store
    - raises DerivationError for malformed or absent inputs
    """

    # ------------------------------------------------------------------
    # Static identity (required)
    # ------------------------------------------------------------------
    name: str                          # e.g. "NetworkRecords"
    input_artifacts: Tuple[str, ...]   # raw artifacts read by compute()
    default_params: Mapping[str, Any]  # optional; merged under request params

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    async def compute(self, store: "ArtifactStore", **params: Any) -> Any:
        ...


def build_provider_index(
    providers: Iterable[DerivedArtifactProvider],
) -> Dict[str, DerivedArtifactProvider]:
    """
    Build the name -> provider mapping, rejecting duplicate names.
    """
    index: Dict[str, DerivedArtifactProvider] = {}
    for provider in providers:
        if provider.name in index:
            raise ValueError(
                f"Duplicate derived artifact provider '{provider.name}'"
            )
        index[provider.name] = provider
    return index


def cache_key(name: str, params: Mapping[str, Any]) -> CacheKey:
    """Stable key for a derivation; parameter values must be hashable."""
    return name, tuple(sorted(params.items()))


class DerivationCache:
    """
    Memoization layer for derived artifacts, scoped to one run.

    Entries are written exactly once (first writer wins) and never
    evicted.
    """

    def __init__(
        self,
        providers: Mapping[str, DerivedArtifactProvider],
        *,
        run_id: Optional[str] = None,
        emitter: Optional[EvaluationEventEmitter] = None,
    ) -> None:
        self._providers = dict(providers)
        self._entries: Dict[CacheKey, asyncio.Future] = {}
        self._run_id = run_id
        self._emitter = emitter or NullEventEmitter()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def has_provider(self, name: str) -> bool:
        return name in self._providers

    def provider(self, name: str) -> DerivedArtifactProvider:
        try:
            return self._providers[name]
        except KeyError:
            raise MissingArtifactError(
                name, reason="no derived artifact provider registered"
            ) from None

    @property
    def provider_names(self) -> Tuple[str, ...]:
        return tuple(self._providers)

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def request(
        self,
        store: "ArtifactStore",
        name: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        provider = self.provider(name)

        # Defaults are part of the key: omitted and explicit defaults
        # address the same entry.
        defaults = getattr(provider, "default_params", None) or {}
        params = {**defaults, **(params or {})}
        key = cache_key(name, params)

        try:
            entry = self._entries.get(key)
        except TypeError as exc:
            raise DerivationError(
                name, reason=f"parameters must be hashable: {exc}", params=params
            ) from exc
        if entry is None:
            entry = asyncio.ensure_future(
                self._compute(store, provider, params)
            )
            self._entries[key] = entry

        return await asyncio.shield(entry)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _compute(
        self,
        store: "ArtifactStore",
        provider: DerivedArtifactProvider,
        params: Dict[str, Any],
    ) -> Any:
        name = provider.name

        missing = [
            artifact
            for artifact in provider.input_artifacts
            if not store.has_raw(artifact)
        ]
        if missing:
            error = DerivationError(
                name,
                reason=f"missing input artifact(s): {', '.join(missing)}",
                params=params,
            )
            await self._report_failure(name, params, error)
            raise error

        await self._emit(
            EvaluationEventType.DERIVATION_STARTED,
            {"artifact": name, "params": params},
        )
        logger.debug("Computing derived artifact %s %s", name, params)

        try:
            value = await provider.compute(store, **params)
        except DerivationError as exc:
            await self._report_failure(name, params, exc)
            raise
        except MissingArtifactError as exc:
            error = DerivationError(name, reason=str(exc), params=params)
            await self._report_failure(name, params, error)
            raise error from exc
        except Exception as exc:
            error = DerivationError(
                name,
                reason=f"{type(exc).__name__}: {exc}",
                params=params,
            )
            await self._report_failure(name, params, error)
            raise error from exc

        await self._emit(
            EvaluationEventType.DERIVATION_COMPLETED,
            {"artifact": name, "params": params},
        )
        return value

    async def _report_failure(
        self,
        name: str,
        params: Mapping[str, Any],
        error: DerivationError,
    ) -> None:
        logger.warning("Derived artifact %s failed: %s", name, error.reason)
        await self._emit(
            EvaluationEventType.DERIVATION_FAILED,
            {"artifact": name, "params": dict(params), "error": error.reason},
        )

    async def _emit(
        self,
        event_type: EvaluationEventType,
        details: Dict[str, Any],
    ) -> None:
        if self._run_id is None:
            return
        await emit_safely(
            self._emitter,
            EvaluationEvent(
                run_id=self._run_id,
                event_type=event_type,
                details=details,
            ),
        )
