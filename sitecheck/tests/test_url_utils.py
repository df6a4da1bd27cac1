import pytest

from sitecheck.app.utils.url import elide_data_uri, format_number, parse_scheme_and_host


def test_parse_scheme_and_host():
    assert parse_scheme_and_host("HTTPS://Example.com/path") == ("https", "example.com")
    assert parse_scheme_and_host("data:text/plain,hi") == ("data", None)
    assert parse_scheme_and_host("http://[::1") == ("", None)


def test_long_data_uri_is_elided():
    uri = "data:image/png;base64," + "A" * 500

    elided = elide_data_uri(uri, max_length=100)

    assert elided == uri[:100] + "…"


def test_other_urls_are_untouched():
    url = "https://example.com/" + "a" * 500

    assert elide_data_uri(url, max_length=100) == url
    assert elide_data_uri("data:,x", max_length=100) == "data:,x"


@pytest.mark.parametrize(
    "value, expected",
    [(0, "0"), (7, "7"), (1200, "1,200"), (1234.56, "1,234.6")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected
