"""
Flags pages that open a database through the deprecated WebSQL API.

The `WebSQL` artifact is None when no database was opened, otherwise a
value describing the first database seen, normally a mapping
({"name": ..., "version": ...}). Any value other than None fails.
"""

from __future__ import annotations

from typing import Any, Mapping, Tuple

from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult

WEBSQL = "WebSQL"


class NoWebSQLCheck:
    @classmethod
    def meta(cls) -> CheckDescriptor:
        return CheckDescriptor(
            name="no-websql",
            description="Avoids WebSQL DB",
            failure_description="Uses WebSQL DB",
            help_text=(
                "Web SQL is deprecated. Consider using IndexedDB instead. "
                "[Learn more](https://developers.google.com/web/tools/lighthouse/audits/web-sql)."
            ),
            required_artifacts=(WEBSQL,),
        )

    def evaluate(self, store: ArtifactStore) -> CheckResult:
        db = store.get(WEBSQL)

        if db is None:
            return CheckResult(passed=True)

        name, version = _describe(db)
        return CheckResult(
            passed=False,
            debug_string=f'Found database "{name}", version: {version}.',
        )


def _describe(db: Any) -> Tuple[Any, Any]:
    if isinstance(db, Mapping):
        return db.get("name"), db.get("version")
    return getattr(db, "name", None), getattr(db, "version", None)
