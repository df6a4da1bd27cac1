"""
Checks that the manifest `short_name` fits on a home screen.

A page without a manifest is not applicable. A manifest that failed to
parse fails outright; nothing else about it is inspected.
"""

from __future__ import annotations

from sitecheck.app.artifacts.providers.manifest_values import (
    MANIFEST,
    MANIFEST_VALUES,
    ManifestValues,
)
from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult


class ManifestShortNameLengthCheck:
    @classmethod
    def meta(cls) -> CheckDescriptor:
        return CheckDescriptor(
            name="manifest-short-name-length",
            description=(
                "Manifest's `short_name` won't be truncated when displayed "
                "on the homescreen"
            ),
            failure_description=(
                "Manifest's `short_name` will be truncated when displayed "
                "on the homescreen"
            ),
            help_text=(
                "Make your app's `short_name` fewer than 12 characters to "
                "ensure that it's not truncated on users' home screens. "
                "[Learn more](https://developers.google.com/web/tools/lighthouse/audits/manifest-short_name-is-not-truncated)."
            ),
            required_artifacts=(MANIFEST, MANIFEST_VALUES),
        )

    async def evaluate(self, store: ArtifactStore) -> CheckResult:
        values: ManifestValues = await store.request(MANIFEST_VALUES)

        if values.is_missing:
            return CheckResult.inapplicable(values.parse_failure_reason)

        if values.is_parse_failure:
            return CheckResult(
                passed=False,
                debug_string=values.parse_failure_reason,
            )

        has_short_name = values.check("hasShortName")
        if has_short_name is None or not has_short_name.passing:
            return CheckResult(
                passed=False,
                debug_string="No short_name found in manifest.",
            )

        short_name_length = values.check("shortNameLength")
        return CheckResult(
            passed=short_name_length is not None and short_name_length.passing,
        )
