"""
Network records derived from a DevTools protocol log.

The raw `devtoolsLogs` artifact maps a gather pass name to the ordered
list of DevTools protocol events captured during that pass:

    {"defaultPass": [{"method": "Network.requestWillBeSent", "params": {...}}, ...]}

This provider folds the request lifecycle events of one pass into one
NetworkRecord per request hop. Only these events are understood:

    Network.requestWillBeSent   opens a record (and closes a redirect hop)
    Network.responseReceived    protocol, status code, MIME type
    Network.loadingFailed       marks the record as failed

All other methods are ignored, as are events for unknown request ids.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ConfigDict

from sitecheck.app.errors import DerivationError
from sitecheck.app.utils.url import parse_scheme_and_host

NETWORK_RECORDS = "NetworkRecords"
DEVTOOLS_LOGS = "devtoolsLogs"

REDIRECT_SUFFIX = ":redirect"


class NetworkRecord(BaseModel):
    """One request hop observed during a gather pass."""

    request_id: str
    url: str
    scheme: str = Field("", description="Lower-cased URL scheme")
    protocol: Optional[str] = Field(
        None,
        description="Protocol reported by the response (e.g. 'h2', 'http/1.1')",
    )
    domain: Optional[str] = Field(None, description="URL hostname")
    resource_type: Optional[str] = None
    status_code: Optional[int] = None
    mime_type: Optional[str] = None
    failed: bool = False
    redirect_source: Optional[str] = Field(
        None,
        description="request_id of the hop that redirected to this one",
    )

    model_config = ConfigDict(frozen=True, extra="forbid")


class NetworkRecordsProvider:
    """
    Derives NetworkRecords for one gather pass.

    Parameters:
        pass_name: key into the devtoolsLogs artifact
    """

    name = NETWORK_RECORDS
    input_artifacts: Tuple[str, ...] = (DEVTOOLS_LOGS,)

    def __init__(self, default_pass_name: str = "defaultPass") -> None:
        self.default_params = {"pass_name": default_pass_name}

    async def compute(self, store, pass_name: str) -> List[NetworkRecord]:
        params = {"pass_name": pass_name}

        logs = store.get(DEVTOOLS_LOGS)
        if not isinstance(logs, Mapping):
            raise DerivationError(
                NETWORK_RECORDS,
                reason=f"{DEVTOOLS_LOGS} must map pass names to event lists",
                params=params,
            )

        if pass_name not in logs:
            raise DerivationError(
                NETWORK_RECORDS,
                reason=f"no devtools log for pass '{pass_name}'",
                params=params,
            )

        log = logs[pass_name]
        if not isinstance(log, list):
            raise DerivationError(
                NETWORK_RECORDS,
                reason=f"devtools log for pass '{pass_name}' is not a list",
                params=params,
            )

        return _fold_events(log, params)


# ---------------------------------------------------------------------------
# Event folding
# ---------------------------------------------------------------------------

def _fold_events(
    log: List[Any],
    params: Dict[str, Any],
) -> List[NetworkRecord]:
    # request_id -> index into `hops` of the currently open hop
    open_hops: Dict[str, int] = {}
    hops: List[Dict[str, Any]] = []

    for index, event in enumerate(log):
        if not isinstance(event, Mapping) or "method" not in event:
            raise DerivationError(
                NETWORK_RECORDS,
                reason=f"malformed devtools event at index {index}",
                params=params,
            )

        method = event["method"]
        event_params = event.get("params") or {}
        request_id = event_params.get("requestId")

        if method == "Network.requestWillBeSent":
            request = event_params.get("request") or {}
            url = request.get("url")
            if not request_id or not url:
                raise DerivationError(
                    NETWORK_RECORDS,
                    reason=f"request without id or url at index {index}",
                    params=params,
                )

            redirect_source = None
            if request_id in open_hops:
                # A repeated id is a redirect: close the previous hop.
                previous = hops[open_hops[request_id]]
                redirect_response = event_params.get("redirectResponse") or {}
                _apply_response(previous, redirect_response)
                redirect_source = previous["request_id"]
                hop_id = previous["request_id"] + REDIRECT_SUFFIX
            else:
                hop_id = request_id

            scheme, domain = parse_scheme_and_host(url)
            hops.append(
                {
                    "request_id": hop_id,
                    "url": url,
                    "scheme": scheme,
                    "domain": domain,
                    "resource_type": event_params.get("type"),
                    "redirect_source": redirect_source,
                }
            )
            open_hops[request_id] = len(hops) - 1

        elif method == "Network.responseReceived":
            if request_id in open_hops:
                _apply_response(
                    hops[open_hops[request_id]],
                    event_params.get("response") or {},
                )

        elif method == "Network.loadingFailed":
            if request_id in open_hops:
                hops[open_hops[request_id]]["failed"] = True

    return [NetworkRecord(**hop) for hop in hops]


def _apply_response(hop: Dict[str, Any], response: Mapping[str, Any]) -> None:
    if not response:
        return
    if response.get("protocol"):
        hop["protocol"] = str(response["protocol"]).lower()
    if response.get("status") is not None:
        hop["status_code"] = int(response["status"])
    if response.get("mimeType"):
        hop["mime_type"] = response["mimeType"]
