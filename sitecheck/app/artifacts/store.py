"""
Run-scoped Artifact Store.

Holds the raw artifacts gathered by an external collector and gives
checks and providers access to derived artifacts through the run's
DerivationCache.

TERMINOLOGY
-----------
- "Raw" artifacts are present in the mapping as gathered. A raw value of
  None is present (e.g. WebSQL=None means no database was opened).
- "Derived" artifacts are computed on demand by a named provider and
  memoized for the rest of the run.

The raw mapping is exposed read-only. The derivation cache is the only
mutable structure reachable from a store and it lives and dies with it.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from sitecheck.app.artifacts.derivation import DerivationCache
from sitecheck.app.errors import MissingArtifactError


class ArtifactStore:
    """
    Immutable snapshot of one inspected subject.

    A raw value that is an exception instance records a collector
    failure; reading it raises MissingArtifactError.
    """

    def __init__(
        self,
        artifacts: Mapping[str, Any],
        derivations: Optional[DerivationCache] = None,
    ) -> None:
        self._raw = MappingProxyType(dict(artifacts))
        self._derivations = (
            derivations if derivations is not None else DerivationCache({})
        )

    # ------------------------------------------------------------------
    # Raw artifacts
    # ------------------------------------------------------------------

    @property
    def raw(self) -> Mapping[str, Any]:
        """Read-only view of the raw artifacts."""
        return self._raw

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._raw)

    @property
    def derivations(self) -> DerivationCache:
        return self._derivations

    def __contains__(self, name: object) -> bool:
        return name in self._raw

    def has_raw(self, name: str) -> bool:
        return name in self._raw

    def is_derived(self, name: str) -> bool:
        return name not in self._raw and self._derivations.has_provider(name)

    def get(self, name: str) -> Any:
        """
        Return a raw artifact.

        Raises MissingArtifactError when the name is absent or the
        collector recorded a failure for it.
        """
        if name not in self._raw:
            raise MissingArtifactError(name)

        value = self._raw[name]
        if isinstance(value, BaseException):
            raise MissingArtifactError(
                name,
                reason=f"collector failed: {type(value).__name__}: {value}",
            )
        return value

    def get_optional(self, name: str, default: Any = None) -> Any:
        """
        Return a raw artifact, or `default` when it is unavailable.

        Never raises. Intended for optional data beyond a check's
        declared requirements.
        """
        value = self._raw.get(name, default)
        if isinstance(value, BaseException):
            return default
        return value

    # ------------------------------------------------------------------
    # Derived artifacts
    # ------------------------------------------------------------------

    async def request(self, name: str, **params: Any) -> Any:
        """
        Return a derived artifact, computing it at most once per run for
        a given parameter signature.
        """
        return await self._derivations.request(self, name, params)

    async def resolve(self, name: str, **params: Any) -> Any:
        """
        Resolve a required artifact name.

        Raw artifacts resolve immediately and ignore `params`. Derived
        artifacts resolve with `params` over their provider's defaults.
        """
        if name in self._raw:
            return self.get(name)
        if self._derivations.has_provider(name):
            return await self.request(name, **params)
        raise MissingArtifactError(name, reason="no raw value and no provider")
