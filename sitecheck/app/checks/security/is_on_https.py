"""
Flags requests made over insecure transports.

A request is secure when its URL scheme or its response protocol is one
of SECURE_SCHEMES, or when it targets a local development host. The
verdict reads only the NetworkRecords derived from the configured pass;
the descriptor declares that pass as the NetworkRecords parameter.
"""

from __future__ import annotations

from typing import Dict, List

from sitecheck.app.artifacts.providers.network_records import (
    DEVTOOLS_LOGS,
    NETWORK_RECORDS,
    NetworkRecord,
)
from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.checks.base import offending_items_result
from sitecheck.app.schemas.check_result import CheckDescriptor, CheckResult
from sitecheck.app.schemas.findings import Finding, TableHeading
from sitecheck.app.utils.url import elide_data_uri, format_number

SECURE_SCHEMES = frozenset(
    {"data", "https", "wss", "blob", "chrome", "chrome-extension"}
)
SECURE_DOMAINS = frozenset({"localhost", "127.0.0.1"})

HEADINGS = [
    TableHeading(key="location", item_type="url", text="Insecure URL"),
    TableHeading(key="label", item_type="text", text="Reason"),
]


def is_secure_record(record: NetworkRecord) -> bool:
    return (
        record.scheme in SECURE_SCHEMES
        or record.protocol in SECURE_SCHEMES
        or record.domain in SECURE_DOMAINS
    )


class IsOnHttpsCheck:
    def __init__(
        self,
        *,
        pass_name: str = "defaultPass",
        elided_url_max_length: int = 100,
    ) -> None:
        self._pass_name = pass_name
        self._elided_url_max_length = elided_url_max_length

    def meta(self) -> CheckDescriptor:
        return CheckDescriptor(
            name="is-on-https",
            description="Uses HTTPS",
            failure_description="Does not use HTTPS",
            help_text=(
                "All sites should be protected with HTTPS, even ones that "
                "don't handle sensitive data. HTTPS prevents intruders from "
                "tampering with or passively listening in on the "
                "communications between your app and your users, and is a "
                "prerequisite for HTTP/2 and many new web platform APIs. "
                "[Learn more](https://developers.google.com/web/tools/lighthouse/audits/https)."
            ),
            required_artifacts=(DEVTOOLS_LOGS, NETWORK_RECORDS),
            artifact_params={NETWORK_RECORDS: self._network_params()},
        )

    async def evaluate(self, store: ArtifactStore) -> CheckResult:
        records: List[NetworkRecord] = await store.request(
            NETWORK_RECORDS, **self._network_params()
        )

        findings = [
            Finding(
                location=elide_data_uri(record.url, self._elided_url_max_length),
                label=f"Insecure scheme: {record.scheme or 'unknown'}",
            )
            for record in records
            if not is_secure_record(record)
        ]

        return offending_items_result(
            findings,
            HEADINGS,
            display_value=_display_value(len(findings)),
        )

    def _network_params(self) -> Dict[str, str]:
        return {"pass_name": self._pass_name}


def _display_value(count: int) -> str | None:
    if count == 0:
        return None
    if count == 1:
        return "1 insecure request found"
    return f"{format_number(count)} insecure requests found"
