from __future__ import annotations

from typing import Any, Optional, Protocol, Tuple

import httpx

from opsmngr.core.client import Writer
from opsmngr.core.config import API_PUBLIC_V1_PATH
from opsmngr.core.context import RequestContext
from opsmngr.core.errors import ArgError
from opsmngr.core.response import Response


class RequestDoer(Protocol):
    def new_request(
        self, method: str, path: str, body: Any = None
    ) -> httpx.Request: ...

    async def do(
        self,
        ctx: Optional[RequestContext],
        request: httpx.Request,
        *,
        into: Any = None,
        writer: Optional[Writer] = None,
    ) -> Tuple[Any, Response]: ...


class GZipRequestDoer(RequestDoer, Protocol):
    def new_gzip_request(self, method: str, path: str) -> httpx.Request: ...


class PlainRequestDoer(RequestDoer, Protocol):
    def new_plain_request(self, method: str, path: str) -> httpx.Request: ...


def require(value: Any, arg: str, reason: str = "must be set") -> None:
    """Raise ArgError for an empty identifier (or a missing body)."""
    if value is None or value == "":
        raise ArgError(arg, reason)


def public_path(fmt: str, *args: Any) -> str:
    """``api/public/v1.0/`` + fmt % args."""
    return f"{API_PUBLIC_V1_PATH}/" + (fmt % args if args else fmt)


class Service:
    def __init__(self, client: RequestDoer):
        self.client = client


__all__ = [
    "RequestDoer",
    "GZipRequestDoer",
    "PlainRequestDoer",
    "Service",
    "public_path",
    "require",
]
