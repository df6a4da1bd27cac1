"""
Raw artifact builders for engine tests.

Produces artifacts in the shapes a collector hands to the engine.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


# ------------------------------------------------------------------
# devtoolsLogs
# ------------------------------------------------------------------

def request_will_be_sent(
    request_id: str,
    url: str,
    *,
    resource_type: str = "Document",
    redirect_status: Optional[int] = None,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {
        "requestId": request_id,
        "request": {"url": url, "method": "GET"},
        "type": resource_type,
    }
    if redirect_status is not None:
        params["redirectResponse"] = {
            "status": redirect_status,
            "protocol": "http/1.1",
        }
    return {"method": "Network.requestWillBeSent", "params": params}


def response_received(
    request_id: str,
    *,
    protocol: str = "h2",
    status: int = 200,
    mime_type: str = "text/html",
) -> Dict[str, Any]:
    return {
        "method": "Network.responseReceived",
        "params": {
            "requestId": request_id,
            "response": {
                "protocol": protocol,
                "status": status,
                "mimeType": mime_type,
            },
        },
    }


def loading_failed(request_id: str) -> Dict[str, Any]:
    return {
        "method": "Network.loadingFailed",
        "params": {"requestId": request_id, "errorText": "net::ERR_FAILED"},
    }


def devtools_logs(
    events: List[Dict[str, Any]],
    pass_name: str = "defaultPass",
) -> Dict[str, List[Dict[str, Any]]]:
    return {pass_name: list(events)}


def https_page_log() -> List[Dict[str, Any]]:
    """A page and one subresource, both over HTTPS."""
    return [
        request_will_be_sent("1", "https://example.com/"),
        response_received("1"),
        request_will_be_sent("2", "https://example.com/app.js", resource_type="Script"),
        response_received("2", mime_type="application/javascript"),
    ]


# ------------------------------------------------------------------
# ChromeConsoleMessages
# ------------------------------------------------------------------

def console_message(
    text: str,
    *,
    url: Optional[str] = "https://example.com/app.js",
    line_number: Optional[int] = None,
    source: str = "violation",
    level: str = "verbose",
) -> Dict[str, Any]:
    entry: Dict[str, Any] = {"source": source, "level": level, "text": text}
    if url is not None:
        entry["url"] = url
    if line_number is not None:
        entry["lineNumber"] = line_number
    return {"entry": entry}


NOTIFICATION_VIOLATION = (
    "Only request notification permission in response to a user gesture."
)


# ------------------------------------------------------------------
# Manifest
# ------------------------------------------------------------------

def manifest(
    value: Optional[Dict[str, Any]] = None,
    *,
    debug_string: Optional[str] = None,
) -> Dict[str, Any]:
    return {
        "raw": "{}" if value is None else repr(value),
        "value": value,
        "debugString": debug_string,
    }


def complete_manifest_value(**overrides: Any) -> Dict[str, Any]:
    value: Dict[str, Any] = {
        "name": "Example Progressive App",
        "short_name": "Example",
        "start_url": "/",
        "display": "standalone",
        "background_color": "#ffffff",
        "theme_color": "#3367d6",
        "icons": [
            {"src": "/icon-192.png", "sizes": "192x192"},
            {"src": "/icon-512.png", "sizes": "512x512"},
        ],
    }
    value.update(overrides)
    return value


# ------------------------------------------------------------------
# Whole artifact sets
# ------------------------------------------------------------------

def passing_artifacts() -> Dict[str, Any]:
    """Artifacts for which every built-in check passes."""
    return {
        "devtoolsLogs": devtools_logs(https_page_log()),
        "WebSQL": None,
        "ChromeConsoleMessages": [],
        "PasswordInputsWithPreventedPaste": [],
        "Manifest": manifest(complete_manifest_value()),
    }
