import pytest

from sitecheck.app.artifacts.derivation import DerivationCache
from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.errors import MissingArtifactError
from sitecheck.tests.fixtures.stubs import CountingProvider

pytestmark = pytest.mark.anyio


def test_raw_none_is_present_not_missing():
    store = ArtifactStore({"WebSQL": None})

    assert "WebSQL" in store
    assert store.get("WebSQL") is None


def test_absent_artifact_raises_missing():
    store = ArtifactStore({})

    with pytest.raises(MissingArtifactError) as exc_info:
        store.get("WebSQL")

    assert exc_info.value.artifact == "WebSQL"


def test_collector_failure_reads_as_missing():
    store = ArtifactStore({"WebSQL": RuntimeError("gatherer crashed")})

    with pytest.raises(MissingArtifactError) as exc_info:
        store.get("WebSQL")

    assert "gatherer crashed" in str(exc_info.value)
    assert store.get_optional("WebSQL", "fallback") == "fallback"


def test_get_optional_never_raises():
    store = ArtifactStore({"WebSQL": None})

    assert store.get_optional("ChromeConsoleMessages") is None
    assert store.get_optional("ChromeConsoleMessages", []) == []
    assert store.get_optional("WebSQL", "unused") is None


def test_raw_view_is_read_only_and_detached():
    source = {"WebSQL": None}
    store = ArtifactStore(source)
    source["WebSQL"] = {"name": "late"}

    assert store.get("WebSQL") is None
    with pytest.raises(TypeError):
        store.raw["WebSQL"] = {"name": "mutated"}


async def test_resolve_prefers_raw_over_derivation():
    provider = CountingProvider("Derived", value="computed")
    cache = DerivationCache({"Derived": provider})
    store = ArtifactStore({"Derived": "gathered"}, derivations=cache)

    assert await store.resolve("Derived") == "gathered"
    assert provider.calls == 0


async def test_resolve_uses_provider_when_not_raw():
    provider = CountingProvider("Derived", value="computed")
    store = ArtifactStore({}, derivations=DerivationCache({"Derived": provider}))

    assert store.is_derived("Derived")
    assert await store.resolve("Derived") == "computed"


async def test_resolve_unknown_name_raises_missing():
    store = ArtifactStore({})

    with pytest.raises(MissingArtifactError):
        await store.resolve("Nowhere")


async def test_resolve_passes_params_to_derivation_only():
    provider = CountingProvider("Derived", value="computed")
    store = ArtifactStore(
        {"Raw": 1}, derivations=DerivationCache({"Derived": provider})
    )

    assert await store.resolve("Derived", pass_name="redirectPass") == "computed"
    assert await store.resolve("Raw", pass_name="redirectPass") == 1
    assert provider.seen_params == [{"pass_name": "redirectPass"}]
