import pytest
from pydantic import ValidationError

from sitecheck.app.config import SitecheckConfig


def test_defaults():
    config = SitecheckConfig()

    assert config.ONLY_CHECKS == ()
    assert config.SKIP_CHECKS == ()
    assert config.DEFAULT_PASS_NAME == "defaultPass"
    assert config.MANIFEST_SHORT_NAME_MAX_LENGTH == 12
    assert config.ELIDED_URL_MAX_LENGTH == 100


def test_from_env(monkeypatch):
    monkeypatch.setenv("SITECHECK_ONLY_CHECKS", "is-on-https, no-websql,,")
    monkeypatch.setenv("SITECHECK_DEFAULT_PASS_NAME", "firstPass")
    monkeypatch.setenv("SITECHECK_MANIFEST_SHORT_NAME_MAX_LENGTH", "15")
    monkeypatch.delenv("SITECHECK_SKIP_CHECKS", raising=False)

    config = SitecheckConfig.from_env()

    assert config.ONLY_CHECKS == ("is-on-https", "no-websql")
    assert config.SKIP_CHECKS == ()
    assert config.DEFAULT_PASS_NAME == "firstPass"
    assert config.MANIFEST_SHORT_NAME_MAX_LENGTH == 15


def test_only_and_skip_must_not_overlap():
    with pytest.raises(ValidationError):
        SitecheckConfig(ONLY_CHECKS=("no-websql",), SKIP_CHECKS=("no-websql",))


def test_lengths_must_be_positive():
    with pytest.raises(ValidationError):
        SitecheckConfig(MANIFEST_SHORT_NAME_MAX_LENGTH=0)


def test_config_is_frozen():
    config = SitecheckConfig()

    with pytest.raises(ValidationError):
        config.DEFAULT_PASS_NAME = "other"
