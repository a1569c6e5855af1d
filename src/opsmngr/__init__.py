"""Python client for the MongoDB Ops Manager / Cloud Manager Public API."""

from . import atmcfg
from .client import Client, new_client
from .core import (
    ArgError,
    ClientConfig,
    ClientConfigBuilder,
    ConfigError,
    ContextCanceledError,
    DeadlineExceededError,
    OpsManagerClient,
    OpsManagerClientError,
    OpsManagerHTTPError,
    OpsManagerModelValidationError,
    OpsManagerParseError,
    OpsManagerTransportError,
    QueryParamsError,
    RequestBuildError,
    RequestContext,
    Response,
    ServiceVersion,
    create_http_client,
    set_base_url,
    set_on_request_completed,
    set_on_response_processed,
    set_query_params,
    set_user_agent,
    set_with_raw,
)
from .core.config import VERSION

__version__ = VERSION

__all__ = [
    "__version__",
    "Client",
    "new_client",
    "atmcfg",
    "OpsManagerClient",
    "ClientConfig",
    "ClientConfigBuilder",
    "RequestContext",
    "Response",
    "ServiceVersion",
    "create_http_client",
    "set_base_url",
    "set_user_agent",
    "set_with_raw",
    "set_on_request_completed",
    "set_on_response_processed",
    "set_query_params",
    "OpsManagerClientError",
    "ConfigError",
    "ArgError",
    "RequestBuildError",
    "QueryParamsError",
    "OpsManagerTransportError",
    "ContextCanceledError",
    "DeadlineExceededError",
    "OpsManagerHTTPError",
    "OpsManagerParseError",
    "OpsManagerModelValidationError",
]
