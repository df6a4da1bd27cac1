"""
Violation filter over captured console messages.

Reusable by any check whose rule is "the browser emitted a warning
matching pattern P". Checks call `find_violations` directly; there is no
base class to inherit from.

Message shape (the `ChromeConsoleMessages` artifact is a list of these):

    {"entry": {"source": "violation", "level": "verbose",
               "text": "...", "url": "https://...", "lineNumber": 12}}

A flat entry without the "entry" wrapper is accepted too, and `location`
is accepted as an alias of `url`.

Policy:
- one Finding per matching message, in the order messages were received
- no deduplication: repeated identical messages each yield a Finding
- the originating location is carried unchanged
"""

from __future__ import annotations

import re
from typing import Any, Collection, List, Mapping, Optional, Sequence, Union

from sitecheck.app.schemas.findings import Finding, TableDetails, TableHeading

Pattern = Union[str, "re.Pattern[str]"]

LABEL_MAX_LENGTH = 120

VIOLATION_HEADINGS = [
    TableHeading(key="location", item_type="url", text="URL"),
    TableHeading(key="line_number", item_type="numeric", text="Line"),
    TableHeading(key="label", item_type="text", text="Message"),
]


def find_violations(
    messages: Sequence[Any],
    pattern: Pattern,
    *,
    sources: Optional[Collection[str]] = None,
) -> List[Finding]:
    """
    Select messages whose text matches `pattern` and convert them to
    Findings.

    Args:
        messages: ordered console messages
        pattern: substring (str) or compiled regular expression
        sources: if given, only messages whose `source` is in this
            collection are considered
    """
    findings: List[Finding] = []

    for message in messages:
        entry = _entry(message)
        if entry is None:
            continue

        if sources is not None and entry.get("source") not in sources:
            continue

        text = entry.get("text")
        if not isinstance(text, str) or not _matches(pattern, text):
            continue

        findings.append(
            Finding(
                location=entry.get("url", entry.get("location")),
                label=_label(text),
                text=text,
                line_number=entry.get("lineNumber"),
            )
        )

    return findings


def make_table_details(
    headings: List[TableHeading],
    findings: List[Finding],
) -> TableDetails:
    """Tabular details with one row per finding."""
    return TableDetails.from_findings(headings, findings)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _entry(message: Any) -> Optional[Mapping[str, Any]]:
    if not isinstance(message, Mapping):
        return None
    entry = message.get("entry", message)
    return entry if isinstance(entry, Mapping) else None


def _matches(pattern: Pattern, text: str) -> bool:
    if isinstance(pattern, str):
        return pattern in text
    return pattern.search(text) is not None


def _label(text: str) -> str:
    first_line = text.strip().splitlines()[0] if text.strip() else text
    if len(first_line) > LABEL_MAX_LENGTH:
        return first_line[: LABEL_MAX_LENGTH - 1] + "…"
    return first_line
