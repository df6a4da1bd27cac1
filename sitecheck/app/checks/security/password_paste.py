"""
Flags password inputs that block pasting.

The `PasswordInputsWithPreventedPaste` artifact lists the password inputs
whose paste event was cancelled by page script, each with the outer HTML
`snippet` of the element. The snippet is reported as the finding text and
`location` is left empty.
"""

from __future__ import annotations

from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.checks.base import offending_items_result
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult
from sitecheck.app.schemas.findings import Finding, TableHeading

PASSWORD_INPUTS = "PasswordInputsWithPreventedPaste"

HEADINGS = [
    TableHeading(key="text", item_type="code", text="Password input"),
    TableHeading(key="label", item_type="text", text="Reason"),
]


class PasswordInputsCanBePastedIntoCheck:
    @classmethod
    def meta(cls) -> CheckDescriptor:
        return CheckDescriptor(
            name="password-inputs-can-be-pasted-into",
            description="Allows users to paste into password fields",
            failure_description="Prevents users from pasting into password fields",
            help_text=(
                "Preventing password pasting undermines good security policy. "
                "[Learn more](https://www.ncsc.gov.uk/blog-post/let-them-paste-passwords)."
            ),
            required_artifacts=(PASSWORD_INPUTS,),
        )

    def evaluate(self, store: ArtifactStore) -> CheckResult:
        inputs = store.get(PASSWORD_INPUTS) or []

        findings = [
            Finding(
                label="Paste into password field is prevented",
                text=item.get("snippet"),
            )
            for item in inputs
        ]

        return offending_items_result(findings, HEADINGS)
