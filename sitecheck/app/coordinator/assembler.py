"""
Default check catalogue assembler.

Wires the built-in checks and derived artifact providers from runtime
configuration.

This module:
- constructs checks and providers with their configured tunables
- fixes the default evaluation order

It does NOT:
- select checks for a run
- evaluate anything
"""

from typing import List

from sitecheck.app.artifacts.derivation import DerivedArtifactProvider
from sitecheck.app.artifacts.providers.manifest_values import (
    ManifestValuesProvider,
)
from sitecheck.app.artifacts.providers.network_records import (
    NetworkRecordsProvider,
)
from sitecheck.app.checks.base import Check
from sitecheck.app.checks.best_practices.no_websql import NoWebSQLCheck
from sitecheck.app.checks.best_practices.notification_on_start import (
    NotificationOnStartCheck,
)
from sitecheck.app.checks.manifest.short_name_length import (
    ManifestShortNameLengthCheck,
)
from sitecheck.app.checks.registry import CheckRegistry
from sitecheck.app.checks.security.is_on_https import IsOnHttpsCheck
from sitecheck.app.checks.security.password_paste import (
    PasswordInputsCanBePastedIntoCheck,
)
from sitecheck.app.config import SitecheckConfig


def build_default_checks(config: SitecheckConfig) -> List[Check]:
    return [
        IsOnHttpsCheck(
            pass_name=config.DEFAULT_PASS_NAME,
            elided_url_max_length=config.ELIDED_URL_MAX_LENGTH,
        ),
        NoWebSQLCheck(),
        NotificationOnStartCheck(),
        PasswordInputsCanBePastedIntoCheck(),
        ManifestShortNameLengthCheck(),
    ]


def build_default_registry(config: SitecheckConfig) -> CheckRegistry:
    return CheckRegistry(build_default_checks(config))


def build_default_providers(
    config: SitecheckConfig,
) -> List[DerivedArtifactProvider]:
    return [
        NetworkRecordsProvider(default_pass_name=config.DEFAULT_PASS_NAME),
        ManifestValuesProvider(
            short_name_max_length=config.MANIFEST_SHORT_NAME_MAX_LENGTH,
        ),
    ]
