from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from .errors import OpsManagerClientError, OpsManagerHTTPError
from .links import Link, get_link

SERVICE_VERSION_HEADER = "X-MongoDB-Service-Version"


@dataclass(frozen=True)
class ServiceVersion:
    git_hash: str = ""
    version: str = ""

    def __str__(self) -> str:
        return f"gitHash={self.git_hash}; versionString={self.version}"


def parse_service_version(header: Optional[str]) -> Optional[ServiceVersion]:
    """Parse ``gitHash=<sha>; versionString=<v>``; unknown pairs are skipped."""
    if not header:
        return None
    git_hash = ""
    version = ""
    for part in header.split(";"):
        key, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if key == "gitHash":
            git_hash = value
        elif key == "versionString":
            version = value
    return ServiceVersion(git_hash=git_hash, version=version)


@dataclass
class Response:
    """
    Wraps the httpx response with API metadata.
    - links: copied from the decoded envelope by list operations
    - raw: full body, only when the client captures raw responses
    """

    http_response: httpx.Response
    links: List[Link] = field(default_factory=list)
    raw: Optional[bytes] = None

    @property
    def status_code(self) -> int:
        return self.http_response.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.http_response.headers

    @property
    def request(self) -> httpx.Request:
        return self.http_response.request

    def current_page(self) -> int:
        """Page number parsed from the ``pageNum`` parameter of the self link."""
        link = get_link(self.links, "self")
        if link is None:
            raise OpsManagerClientError("no self link found in response links")
        try:
            page = link.href_query_param("pageNum")
        except httpx.InvalidURL as exc:
            raise OpsManagerClientError(f"invalid self link href {link.href!r}") from exc
        if page is None:
            raise OpsManagerClientError(f"self link {link.href!r} has no pageNum")
        try:
            return int(page)
        except ValueError as exc:
            raise OpsManagerClientError(f"pageNum {page!r} is not a number") from exc

    def service_version(self) -> Optional[ServiceVersion]:
        return parse_service_version(self.headers.get(SERVICE_VERSION_HEADER))


async def check_response(response: Response) -> None:
    """Raise OpsManagerHTTPError when the response is not a 2xx."""
    resp = response.http_response
    if 200 <= resp.status_code < 300:
        return

    await resp.aread()
    request = resp.request
    response_json: Optional[Dict[str, Any]] = None
    response_text: Optional[str] = None
    message = resp.reason_phrase or "request failed"

    try:
        parsed = resp.json()
    except ValueError:
        parsed = None
        response_text = (resp.text or "")[:500]

    fields: Dict[str, Any] = {}
    if isinstance(parsed, dict):
        response_json = parsed
        fields = {
            "error_code": parsed.get("errorCode"),
            "reason": parsed.get("reason"),
            "detail": parsed.get("detail"),
            "parameters": parsed.get("parameters"),
        }
        message = parsed.get("detail") or parsed.get("reason") or message

    raise OpsManagerHTTPError(
        status_code=resp.status_code,
        method=request.method,
        url=str(request.url),
        message=message,
        response_json=response_json,
        response_text=response_text,
        response=response,
        **fields,
    )


__all__ = [
    "Response",
    "ServiceVersion",
    "SERVICE_VERSION_HEADER",
    "parse_service_version",
    "check_response",
]
