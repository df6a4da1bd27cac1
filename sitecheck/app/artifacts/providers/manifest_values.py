"""
Manifest values derived from the parsed web app manifest.

The raw `Manifest` artifact is produced by a manifest parser outside this
package. It is either None (no manifest was fetched) or:

    {"raw": "<manifest text>", "value": {...} | None, "debugString": str | None}

`value` is None when parsing failed; `debugString` then explains why.
Fields inside `value` may be plain values or parser wrappers of the form
{"raw": ..., "value": ..., "debugString": ...}.

The provider evaluates a fixed set of manifest sub-checks once per run,
so every manifest-related check reads the same verdicts.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from sitecheck.app.errors import DerivationError

MANIFEST_VALUES = "ManifestValues"
MANIFEST = "Manifest"

PWA_DISPLAY_VALUES = frozenset({"minimal-ui", "fullscreen", "standalone"})

_SIZE_RE = re.compile(r"^(\d+)x(\d+)$", re.IGNORECASE)


class ManifestCheck(BaseModel):
    """Verdict of one manifest sub-check."""

    id: str
    failure_text: str
    passing: bool

    model_config = ConfigDict(frozen=True, extra="forbid")


class ManifestValues(BaseModel):
    """
    Manifest sub-check verdicts.

    When `is_parse_failure` is True, `all_checks` is empty and nothing
    else about the manifest can be trusted.
    """

    is_missing: bool = False
    is_parse_failure: bool = False
    parse_failure_reason: Optional[str] = None
    all_checks: Tuple[ManifestCheck, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")

    def check(self, check_id: str) -> Optional[ManifestCheck]:
        for manifest_check in self.all_checks:
            if manifest_check.id == check_id:
                return manifest_check
        return None


class ManifestValuesProvider:
    """Derives ManifestValues from the Manifest artifact."""

    name = MANIFEST_VALUES
    input_artifacts: Tuple[str, ...] = (MANIFEST,)
    default_params: Mapping[str, Any] = {}

    def __init__(self, short_name_max_length: int = 12) -> None:
        self._short_name_max_length = short_name_max_length

    async def compute(self, store) -> ManifestValues:
        manifest = store.get(MANIFEST)

        if manifest is None:
            return ManifestValues(
                is_missing=True,
                is_parse_failure=True,
                parse_failure_reason="No manifest was fetched",
            )

        if not isinstance(manifest, Mapping):
            raise DerivationError(
                MANIFEST_VALUES,
                reason=(
                    f"{MANIFEST} must be None or a mapping, "
                    f"got {type(manifest).__name__}"
                ),
            )

        value = manifest.get("value")
        if value is None:
            return ManifestValues(
                is_parse_failure=True,
                parse_failure_reason=(
                    manifest.get("debugString") or "Manifest could not be parsed"
                ),
            )

        if not isinstance(value, Mapping):
            raise DerivationError(
                MANIFEST_VALUES,
                reason="Manifest value must be a mapping of fields",
            )

        return ManifestValues(all_checks=tuple(self._evaluate(value)))

    # ------------------------------------------------------------------
    # Sub-checks
    # ------------------------------------------------------------------

    def _evaluate(self, value: Mapping[str, Any]) -> Iterable[ManifestCheck]:
        short_name = _field(value, "short_name")
        name = _field(value, "name")
        icon_sizes = list(_icon_edges(_field(value, "icons")))
        limit = self._short_name_max_length

        yield ManifestCheck(
            id="hasStartUrl",
            failure_text="Manifest does not contain a `start_url`",
            passing=bool(_field(value, "start_url")),
        )
        yield ManifestCheck(
            id="hasIconsAtLeast192px",
            failure_text="Manifest does not have icons at least 192px",
            passing=any(edge >= 192 for edge in icon_sizes),
        )
        yield ManifestCheck(
            id="hasIconsAtLeast512px",
            failure_text="Manifest does not have icons at least 512px",
            passing=any(edge >= 512 for edge in icon_sizes),
        )
        yield ManifestCheck(
            id="hasPWADisplayValue",
            failure_text=(
                "Manifest's `display` value is not one of: "
                + " | ".join(sorted(PWA_DISPLAY_VALUES))
            ),
            passing=_field(value, "display") in PWA_DISPLAY_VALUES,
        )
        yield ManifestCheck(
            id="hasBackgroundColor",
            failure_text="Manifest does not have `background_color`",
            passing=bool(_field(value, "background_color")),
        )
        yield ManifestCheck(
            id="hasThemeColor",
            failure_text="Manifest does not have `theme_color`",
            passing=bool(_field(value, "theme_color")),
        )
        yield ManifestCheck(
            id="hasShortName",
            failure_text="Manifest does not have `short_name`",
            passing=bool(short_name),
        )
        yield ManifestCheck(
            id="shortNameLength",
            failure_text=(
                "Manifest `short_name` will be truncated when displayed "
                "on the homescreen"
            ),
            passing=bool(short_name) and len(str(short_name)) <= limit,
        )
        yield ManifestCheck(
            id="hasName",
            failure_text="Manifest does not have `name`",
            passing=bool(name),
        )


def _field(value: Mapping[str, Any], key: str) -> Any:
    field = value.get(key)
    if isinstance(field, Mapping) and "value" in field:
        return field["value"]
    return field


def _icon_edges(icons: Any) -> Iterable[int]:
    """Yield the smaller edge of every square-ish declared icon size."""
    if not isinstance(icons, list):
        return
    for icon in icons:
        if isinstance(icon, Mapping) and "value" in icon and "sizes" not in icon:
            icon = icon["value"]
        if not isinstance(icon, Mapping):
            continue
        sizes = _field(icon, "sizes")
        if isinstance(sizes, str):
            sizes = sizes.split()
        if not isinstance(sizes, list):
            continue
        for size in sizes:
            match = _SIZE_RE.match(str(size).strip())
            if match:
                yield min(int(match.group(1)), int(match.group(2)))
