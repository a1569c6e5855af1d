from __future__ import annotations

import asyncio
import json
import logging
import time
from functools import lru_cache
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Optional,
    Protocol,
    Tuple,
    Type,
    TypeVar,
)

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from .config import ClientConfig, ClientOption, build_config
from .context import RequestContext
from .errors import (
    DeadlineExceededError,
    OpsManagerClientError,
    OpsManagerModelValidationError,
    OpsManagerParseError,
    OpsManagerTransportError,
    RequestBuildError,
)
from .response import Response, check_response

MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_GZIP = "application/gzip"
MEDIA_TYPE_PLAIN = "text/plain"

T = TypeVar("T")
C = TypeVar("C", bound="OpsManagerClient")


class Writer(Protocol):
    def write(self, data: bytes) -> Any: ...


@lru_cache(maxsize=None)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _zero_value(into: Any) -> Any:
    if isinstance(into, type) and issubclass(into, BaseModel):
        return into.model_construct()
    return None


def encode_body(body: Any) -> bytes:
    """
    JSON-encode a request body.
    - pydantic models are dumped by alias with None fields dropped
    - '<', '>', '&' and non-ASCII text are written literally
    """
    try:
        payload = to_jsonable_python(body, by_alias=True, exclude_none=True)
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as exc:
        raise RequestBuildError(f"cannot encode request body: {exc}") from exc


class OpsManagerClient:
    """
    Shared request/response pipeline for the Ops Manager API.
    - Builds JSON, gzip and plain-text requests relative to the base URL
    - Sends them through the injected httpx.AsyncClient (auth lives there)
    - Decodes JSON into the requested type or streams bytes into a writer
    - No retries; every failure is raised to the caller
    """

    def __init__(
        self,
        *,
        http: Optional[httpx.AsyncClient] = None,
        config: Optional[ClientConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config if config is not None else ClientConfig()
        self.log = logger or logging.getLogger("opsmngr.client")

        self._owns_http = http is None
        self.http = http or httpx.AsyncClient()

    @classmethod
    def new(
        cls: Type[C], http: Optional[httpx.AsyncClient] = None, *options: ClientOption
    ) -> C:
        """Build from functional options; without `http` a private transport is created."""
        return cls(http=http, config=build_config(*options))

    @property
    def base_url(self) -> httpx.URL:
        return self.config.base_url

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "OpsManagerClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # --- Request builders -------------------------------------------------- #

    def _resolve(self, path: str) -> httpx.URL:
        try:
            return self.config.base_url.join(path)
        except httpx.InvalidURL as exc:
            raise RequestBuildError(f"cannot parse path {path!r}: {exc}") from exc

    def _build(
        self,
        method: str,
        path: str,
        accept: str,
        content: Optional[bytes] = None,
    ) -> httpx.Request:
        url = self._resolve(path)
        headers: Dict[str, str] = {"Accept": accept}
        if content is not None:
            headers["Content-Type"] = MEDIA_TYPE_JSON
        if self.config.user_agent:
            headers["User-Agent"] = self.config.user_agent
        return self.http.build_request(
            method.upper(), url, content=content, headers=headers
        )

    def new_request(self, method: str, path: str, body: Any = None) -> httpx.Request:
        """JSON request; `body` is encoded only when it is not None."""
        content = encode_body(body) if body is not None else None
        return self._build(method, path, MEDIA_TYPE_JSON, content)

    def new_gzip_request(self, method: str, path: str) -> httpx.Request:
        return self._build(method, path, MEDIA_TYPE_GZIP)

    def new_plain_request(self, method: str, path: str) -> httpx.Request:
        return self._build(method, path, MEDIA_TYPE_PLAIN)

    # --- Execution --------------------------------------------------------- #

    async def _guarded(
        self,
        ctx: RequestContext,
        fn: Callable[..., Awaitable[T]],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        """
        Run fn(*args, **kwargs) until it finishes or `ctx` is done.
        The call is cancelled when the context is cancelled or its deadline passes.
        """
        ctx_err = ctx.err()
        if ctx_err is not None:
            raise ctx_err

        task = asyncio.ensure_future(fn(*args, **kwargs))
        cancelled = asyncio.ensure_future(ctx.wait_cancelled())
        try:
            done, _ = await asyncio.wait(
                {task, cancelled},
                timeout=ctx.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not task.done():
                task.cancel()
                await asyncio.wait({task})

        if task in done:
            return task.result()

        # asyncio.wait may time out a hair before the monotonic deadline
        raise ctx.err() or DeadlineExceededError()

    def _transport_error(
        self, ctx: RequestContext, request: httpx.Request, exc: httpx.HTTPError
    ) -> OpsManagerClientError:
        ctx_err = ctx.err()
        if ctx_err is not None:
            return ctx_err
        return OpsManagerTransportError(
            f"Network/timeout error calling {request.method} {request.url}: {exc}"
        )

    async def do(
        self,
        ctx: Optional[RequestContext],
        request: httpx.Request,
        *,
        into: Any = None,
        writer: Optional[Writer] = None,
    ) -> Tuple[Any, Response]:
        """
        Send `request` and handle the response.
        - into: type to decode the JSON body into; an empty body gives its zero value
        - writer: receives the body bytes verbatim (gzip archives, plain text)
        - neither: the body is not read
        `ctx` bounds the whole call, body included.
        Raises OpsManagerHTTPError on non-2xx, with the Response attached.
        """
        if ctx is None:
            raise OpsManagerClientError("context must not be None")
        if into is not None and writer is not None:
            raise ValueError("pass either into or writer, not both")

        start = time.perf_counter()
        try:
            raw_response = await self._guarded(
                ctx, self.http.send, request, stream=True
            )
        except httpx.HTTPError as exc:
            raise self._transport_error(ctx, request, exc) from exc

        response = Response(http_response=raw_response)
        try:
            if self.config.on_request_completed is not None:
                self.config.on_request_completed(request, raw_response)
            try:
                value = await self._guarded(
                    ctx, self._consume, response, request, into, writer
                )
            except httpx.HTTPError as exc:
                raise self._transport_error(ctx, request, exc) from exc
            return value, response
        finally:
            await raw_response.aclose()
            self.log.debug(
                "op.request",
                extra={
                    "request_id": ctx.request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "status": raw_response.status_code,
                    "duration_ms": int((time.perf_counter() - start) * 1000),
                },
            )
            if self.config.on_response_processed is not None:
                self.config.on_response_processed(response)

    async def _consume(
        self,
        response: Response,
        request: httpx.Request,
        into: Any,
        writer: Optional[Writer],
    ) -> Any:
        raw_response = response.http_response
        if self.config.with_raw:
            # aread() caches the content, later reads replay it.
            response.raw = await raw_response.aread()

        await check_response(response)

        if writer is not None:
            async for chunk in raw_response.aiter_bytes():
                writer.write(chunk)
            return None

        if into is None:
            return None

        body = await raw_response.aread()
        return self._decode(into, body, request)

    def _decode(self, into: Any, body: bytes, request: httpx.Request) -> Any:
        if not body.strip():
            return _zero_value(into)

        try:
            payload = json.loads(body)
        except ValueError as exc:
            snippet = body[:500].decode("utf-8", errors="replace")
            raise OpsManagerParseError(
                f"Expected JSON from {request.method} {request.url}, "
                f"got non-JSON body snippet: {snippet!r}"
            ) from exc

        try:
            return _adapter(into).validate_python(payload)
        except ValidationError as exc:
            name = getattr(into, "__name__", repr(into))
            raise OpsManagerModelValidationError(
                f"Response did not match model {name}: {exc}"
            ) from exc


__all__ = [
    "OpsManagerClient",
    "Writer",
    "encode_body",
    "MEDIA_TYPE_JSON",
    "MEDIA_TYPE_GZIP",
    "MEDIA_TYPE_PLAIN",
]
