"""
Check registry.

Maps check names to check implementations. New checks are added by
registering an implementation, never by growing a class hierarchy.

The registry also answers the collector's question "which raw artifacts
must I gather for these checks?" by expanding derived artifact names to
their providers' raw inputs.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set

from sitecheck.app.artifacts.derivation import DerivedArtifactProvider
from sitecheck.app.checks.base import Check
from sitecheck.app.errors import UnknownCheckError


class CheckRegistry:
    """Ordered name -> check mapping."""

    def __init__(self, checks: Iterable[Check] = ()) -> None:
        self._checks: Dict[str, Check] = {}
        for check in checks:
            self.register(check)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, check: Check) -> Check:
        name = check.meta().name
        if name in self._checks:
            raise ValueError(f"Check '{name}' is already registered")
        self._checks[name] = check
        return check

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def names(self) -> List[str]:
        return list(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._checks

    def __len__(self) -> int:
        return len(self._checks)

    def get(self, name: str) -> Check:
        try:
            return self._checks[name]
        except KeyError:
            raise UnknownCheckError([name]) from None

    def select(
        self,
        names: Optional[Sequence[str]] = None,
        *,
        skip: Iterable[str] = (),
    ) -> List[Check]:
        """
        Return checks in evaluation order.

        `names` None selects every registered check in registration
        order; otherwise the given order is kept. Unknown names raise
        UnknownCheckError before anything runs.
        """
        skip = set(skip)
        requested = list(self._checks) if names is None else list(names)

        unknown = {n for n in requested if n not in self._checks}
        unknown |= {n for n in skip if n not in self._checks}
        if unknown:
            raise UnknownCheckError(unknown)

        duplicates = {n for n in requested if requested.count(n) > 1}
        if duplicates:
            raise ValueError(f"Checks requested more than once: {sorted(duplicates)}")

        return [self._checks[n] for n in requested if n not in skip]

    # ------------------------------------------------------------------
    # Collector contract
    # ------------------------------------------------------------------

    def required_artifacts(
        self,
        names: Optional[Sequence[str]] = None,
    ) -> Set[str]:
        """Artifact names declared by the selected checks."""
        required: Set[str] = set()
        for check in self.select(names):
            required.update(check.meta().required_artifacts)
        return required

    def required_raw_artifacts(
        self,
        providers: Mapping[str, DerivedArtifactProvider],
        names: Optional[Sequence[str]] = None,
    ) -> Set[str]:
        """
        Raw artifacts a collector must gather for the selected checks.

        Derived names are replaced, recursively, by their providers'
        input artifacts.
        """
        raw: Set[str] = set()
        pending = list(self.required_artifacts(names))
        seen: Set[str] = set()

        while pending:
            name = pending.pop()
            if name in seen:
                continue
            seen.add(name)

            provider = providers.get(name)
            if provider is None:
                raw.add(name)
            else:
                pending.extend(provider.input_artifacts)

        return raw
