"""
Flags pages that request notification permission on load.

Browsers log a console violation when the Notification permission is
requested without a user gesture; any such message captured during the
load is an offending occurrence.
"""

from __future__ import annotations

import re

from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.checks.base import offending_items_result
from sitecheck.app.checks.violations import VIOLATION_HEADINGS, find_violations
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult

CONSOLE_MESSAGES = "ChromeConsoleMessages"

NOTIFICATION_PATTERN = re.compile(r"notification permission")


class NotificationOnStartCheck:
    @classmethod
    def meta(cls) -> CheckDescriptor:
        return CheckDescriptor(
            name="notification-on-start",
            description="Avoids requesting the notification permission on page load",
            failure_description="Requests the notification permission on page load",
            help_text=(
                "Users are mistrustful of or confused by sites that request "
                "to send notifications without context. Consider tying the "
                "request to a user gesture instead. "
                "[Learn more](https://developers.google.com/web/tools/lighthouse/audits/notifications-on-load)."
            ),
            required_artifacts=(CONSOLE_MESSAGES,),
        )

    def evaluate(self, store: ArtifactStore) -> CheckResult:
        findings = find_violations(store.get(CONSOLE_MESSAGES), NOTIFICATION_PATTERN)
        return offending_items_result(findings, VIOLATION_HEADINGS)
