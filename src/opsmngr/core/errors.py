from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from .response import Response


class OpsManagerClientError(Exception):
    """Base error for client failures."""


class ConfigError(OpsManagerClientError):
    """Raised when the client configuration is invalid or incomplete."""


class ArgError(OpsManagerClientError, ValueError):
    """A required argument was empty or missing; raised before any request."""

    def __init__(self, arg: str, reason: str):
        super().__init__(f"{arg} is invalid because {reason}")
        self.arg = arg
        self.reason = reason


class RequestBuildError(OpsManagerClientError):
    """The request could not be built (bad URL or unencodable body)."""


class QueryParamsError(RequestBuildError):
    pass


class OpsManagerTransportError(OpsManagerClientError):
    pass


class ContextError(OpsManagerClientError):
    pass


class ContextCanceledError(ContextError):
    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class DeadlineExceededError(ContextError):
    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class OpsManagerParseError(OpsManagerClientError):
    pass


class OpsManagerModelValidationError(OpsManagerClientError):
    pass


class OpsManagerHTTPError(OpsManagerClientError):
    """Non-2xx response from the API.

    Ops Manager error bodies look like
    ``{"error": 404, "errorCode": "GROUP_NOT_FOUND", "reason": "Not Found",
    "detail": "...", "parameters": [...]}``; every field is optional here.
    """

    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        error_code: Optional[str] = None,
        reason: Optional[str] = None,
        detail: Optional[str] = None,
        parameters: Optional[List[Any]] = None,
        response_json: Optional[Dict[str, Any]] = None,
        response_text: Optional[str] = None,
        response: Optional["Response"] = None,
    ):
        super().__init__(f"{method} {url}: {status_code} ({error_code or ''}) {message}")
        self.status_code = status_code
        self.method = method
        self.url = url
        self.error_code = error_code
        self.reason = reason
        self.detail = detail
        self.parameters = parameters or []
        self.response_json = response_json
        self.response_text = response_text
        self.response = response


__all__ = [
    "OpsManagerClientError",
    "ConfigError",
    "ArgError",
    "RequestBuildError",
    "QueryParamsError",
    "OpsManagerTransportError",
    "ContextError",
    "ContextCanceledError",
    "DeadlineExceededError",
    "OpsManagerParseError",
    "OpsManagerModelValidationError",
    "OpsManagerHTTPError",
]
