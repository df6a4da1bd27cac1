import pytest

from sitecheck.app.artifacts.store import ArtifactStore
from sitecheck.app.checks.best_practices.no_websql import NoWebSQLCheck
from sitecheck.app.checks.best_practices.notification_on_start import (
    NotificationOnStartCheck,
)
from sitecheck.tests.fixtures.artifact_factory import (
    NOTIFICATION_VIOLATION,
    console_message,
)


# ------------------------------------------------------------------
# no-websql
# ------------------------------------------------------------------

def test_no_database_passes():
    result = NoWebSQLCheck().evaluate(ArtifactStore({"WebSQL": None}))

    assert result.passed is True
    assert result.debug_string is None


def test_database_fails_with_name_and_version():
    store = ArtifactStore({"WebSQL": {"name": "mydb", "version": "1.0"}})

    result = NoWebSQLCheck().evaluate(store)

    assert result.passed is False
    assert result.debug_string == 'Found database "mydb", version: 1.0.'


@pytest.mark.parametrize("db", [{}, [], "", 0])
def test_any_recorded_database_fails(db):
    result = NoWebSQLCheck().evaluate(ArtifactStore({"WebSQL": db}))

    assert result.passed is False
    assert result.debug_string == 'Found database "None", version: None.'


def test_non_mapping_database_is_described_by_attributes():
    class Database:
        name = "cache"
        version = "3"

    result = NoWebSQLCheck().evaluate(ArtifactStore({"WebSQL": Database()}))

    assert result.passed is False
    assert result.debug_string == 'Found database "cache", version: 3.'


def test_websql_descriptor():
    meta = NoWebSQLCheck.meta()

    assert meta.name == "no-websql"
    assert meta.required_artifacts == ("WebSQL",)
    assert meta.informative is False


# ------------------------------------------------------------------
# notification-on-start
# ------------------------------------------------------------------

def test_no_violations_passes():
    store = ArtifactStore(
        {"ChromeConsoleMessages": [console_message("Unrelated warning")]}
    )

    result = NotificationOnStartCheck().evaluate(store)

    assert result.passed is True
    assert result.details is None


def test_each_violation_is_reported_in_order():
    messages = [
        console_message(NOTIFICATION_VIOLATION, url="https://a.test/1.js", line_number=10),
        console_message("Unrelated warning"),
        console_message(NOTIFICATION_VIOLATION, url="https://a.test/2.js", line_number=20),
    ]

    result = NotificationOnStartCheck().evaluate(
        ArtifactStore({"ChromeConsoleMessages": messages})
    )

    assert result.passed is False
    assert [row["location"] for row in result.details.items] == [
        "https://a.test/1.js",
        "https://a.test/2.js",
    ]
    assert [f.line_number for f in result.raw_extended_info] == [10, 20]


@pytest.mark.parametrize("count", [1, 2, 5])
def test_identical_violations_each_yield_a_row(count):
    message = console_message(NOTIFICATION_VIOLATION, url="https://a.test/1.js")

    result = NotificationOnStartCheck().evaluate(
        ArtifactStore({"ChromeConsoleMessages": [message] * count})
    )

    assert len(result.details.items) == count
