import pytest

from sitecheck.app.checks.registry import CheckRegistry
from sitecheck.app.config import SitecheckConfig
from sitecheck.app.coordinator.assembler import (
    build_default_providers,
    build_default_registry,
)
from sitecheck.app.artifacts.derivation import build_provider_index
from sitecheck.app.errors import UnknownCheckError
from sitecheck.tests.fixtures.stubs import CountingCheck, CountingProvider


def _registry():
    return CheckRegistry(
        [
            CountingCheck("alpha", required=("A",)),
            CountingCheck("beta", required=("B", "Derived")),
            CountingCheck("gamma"),
        ]
    )


def test_registration_order_is_default_order():
    registry = _registry()

    assert registry.names == ["alpha", "beta", "gamma"]
    assert len(registry) == 3
    assert "beta" in registry


def test_duplicate_registration_rejected():
    registry = _registry()

    with pytest.raises(ValueError):
        registry.register(CountingCheck("alpha"))


def test_select_keeps_requested_order():
    names = [c.meta().name for c in _registry().select(["gamma", "alpha"])]

    assert names == ["gamma", "alpha"]


def test_select_with_skip():
    names = [c.meta().name for c in _registry().select(skip=["beta"])]

    assert names == ["alpha", "gamma"]


def test_unknown_names_raise_before_anything_runs():
    registry = _registry()

    with pytest.raises(UnknownCheckError) as exc_info:
        registry.select(["alpha", "delta", "epsilon"])

    assert exc_info.value.names == ["delta", "epsilon"]
    assert isinstance(exc_info.value, KeyError)

    with pytest.raises(UnknownCheckError):
        registry.select(skip=["delta"])

    with pytest.raises(UnknownCheckError):
        registry.get("delta")


def test_duplicate_selection_rejected():
    with pytest.raises(ValueError):
        _registry().select(["alpha", "alpha"])


def test_required_raw_artifacts_expands_derivations():
    registry = _registry()
    providers = build_provider_index(
        [
            CountingProvider("Derived", input_artifacts=("Base", "Intermediate")),
            CountingProvider("Intermediate", input_artifacts=("Deep",)),
        ]
    )

    assert registry.required_artifacts() == {"A", "B", "Derived"}
    assert registry.required_raw_artifacts(providers) == {"A", "B", "Base", "Deep"}
    assert registry.required_raw_artifacts(providers, ["alpha"]) == {"A"}


def test_default_catalogue_raw_artifacts():
    config = SitecheckConfig()
    registry = build_default_registry(config)
    providers = build_provider_index(build_default_providers(config))

    assert registry.names == [
        "is-on-https",
        "no-websql",
        "notification-on-start",
        "password-inputs-can-be-pasted-into",
        "manifest-short-name-length",
    ]
    assert registry.required_raw_artifacts(providers) == {
        "devtoolsLogs",
        "WebSQL",
        "ChromeConsoleMessages",
        "PasswordInputsWithPreventedPaste",
        "Manifest",
    }
