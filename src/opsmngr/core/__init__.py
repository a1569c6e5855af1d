"""Request/response pipeline shared by every resource service."""

from .client import OpsManagerClient, Writer, encode_body
from .config import (
    API_PUBLIC_V1_PATH,
    DEFAULT_BASE_URL,
    DEFAULT_USER_AGENT,
    ClientConfig,
    ClientConfigBuilder,
    ClientOption,
    build_config,
    config_from_env,
    create_http_client,
    http_client_from_env,
    load_env_config,
    set_base_url,
    set_on_request_completed,
    set_on_response_processed,
    set_user_agent,
    set_with_raw,
)
from .context import RequestContext, ensure_request_id
from .errors import (
    ArgError,
    ConfigError,
    ContextCanceledError,
    ContextError,
    DeadlineExceededError,
    OpsManagerClientError,
    OpsManagerHTTPError,
    OpsManagerModelValidationError,
    OpsManagerParseError,
    OpsManagerTransportError,
    QueryParamsError,
    RequestBuildError,
)
from .links import Link, get_link, get_link_href, has_next_page
from .logging import LogfmtFormatter, setup_logging
from .query import ListOptions, QueryOptions, encode_options, set_query_params
from .response import Response, ServiceVersion, check_response, parse_service_version

__all__ = [
    # Client
    "OpsManagerClient",
    "Writer",
    "encode_body",
    # Config
    "API_PUBLIC_V1_PATH",
    "DEFAULT_BASE_URL",
    "DEFAULT_USER_AGENT",
    "ClientConfig",
    "ClientConfigBuilder",
    "ClientOption",
    "build_config",
    "config_from_env",
    "create_http_client",
    "http_client_from_env",
    "load_env_config",
    "set_base_url",
    "set_user_agent",
    "set_with_raw",
    "set_on_request_completed",
    "set_on_response_processed",
    # Context
    "RequestContext",
    "ensure_request_id",
    # Exceptions
    "OpsManagerClientError",
    "ConfigError",
    "ArgError",
    "RequestBuildError",
    "QueryParamsError",
    "OpsManagerTransportError",
    "ContextError",
    "ContextCanceledError",
    "DeadlineExceededError",
    "OpsManagerHTTPError",
    "OpsManagerParseError",
    "OpsManagerModelValidationError",
    # Links and pagination
    "Link",
    "get_link",
    "get_link_href",
    "has_next_page",
    "ListOptions",
    "QueryOptions",
    "encode_options",
    "set_query_params",
    "Response",
    "ServiceVersion",
    "check_response",
    "parse_service_version",
    # Logging
    "LogfmtFormatter",
    "setup_logging",
]
