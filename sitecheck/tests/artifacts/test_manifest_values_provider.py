import pytest

from sitecheck.app.artifacts.derivation import DerivationCache, build_provider_index
from sitecheck.app.artifacts.providers.manifest_values import (
    MANIFEST_VALUES,
    ManifestValuesProvider,
)
from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.errors import DerivationError
from sitecheck.tests.fixtures.artifact_factory import (
    complete_manifest_value,
    manifest,
)

pytestmark = pytest.mark.anyio


async def _values(raw_manifest, provider=None):
    provider = provider or ManifestValuesProvider()
    cache = DerivationCache(build_provider_index([provider]))
    store = ArtifactStore({"Manifest": raw_manifest}, derivations=cache)
    return await store.request(MANIFEST_VALUES)


async def test_missing_manifest():
    values = await _values(None)

    assert values.is_missing is True
    assert values.is_parse_failure is True
    assert values.all_checks == ()


async def test_parse_failure_keeps_reason():
    values = await _values(
        manifest(None, debug_string="Unexpected token } in JSON")
    )

    assert values.is_missing is False
    assert values.is_parse_failure is True
    assert values.parse_failure_reason == "Unexpected token } in JSON"
    assert values.check("hasShortName") is None


async def test_complete_manifest_passes_every_check():
    values = await _values(manifest(complete_manifest_value()))

    assert not values.is_parse_failure
    assert len(values.all_checks) == 9
    assert all(check.passing for check in values.all_checks)


async def test_long_short_name_fails_length_only():
    values = await _values(
        manifest(complete_manifest_value(short_name="Example Progressive"))
    )

    assert values.check("hasShortName").passing is True
    assert values.check("shortNameLength").passing is False


async def test_short_name_limit_is_configurable():
    values = await _values(
        manifest(complete_manifest_value(short_name="Example Progressive")),
        ManifestValuesProvider(short_name_max_length=30),
    )

    assert values.check("shortNameLength").passing is True


async def test_parser_wrapped_fields_are_unwrapped():
    value = complete_manifest_value(
        short_name={"raw": "Ex", "value": "Ex", "debugString": None},
        display={"raw": "browser", "value": "browser", "debugString": None},
        icons={"raw": [], "value": [{"value": {"sizes": {"value": ["256x256"]}}}]},
    )

    values = await _values(manifest(value))

    assert values.check("hasShortName").passing is True
    assert values.check("hasPWADisplayValue").passing is False
    assert values.check("hasIconsAtLeast192px").passing is True
    assert values.check("hasIconsAtLeast512px").passing is False


async def test_non_mapping_manifest_fails_derivation():
    with pytest.raises(DerivationError):
        await _values("{not parsed}")
