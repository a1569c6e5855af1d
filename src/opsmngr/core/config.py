from __future__ import annotations

import os
import platform
import ssl
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, Optional, Tuple, Union

import httpx
from dotenv import load_dotenv

from .errors import ConfigError

if TYPE_CHECKING:
    from .response import Response

VERSION = "0.1.0"
CLOUD_URL = "https://cloud.mongodb.com/"
DEFAULT_BASE_URL = CLOUD_URL
API_PUBLIC_V1_PATH = "api/public/v1.0"
DEFAULT_USER_AGENT = (
    f"opsmngr-python/{VERSION} ({platform.system().lower()}; {platform.machine()})"
)
DEFAULT_TIMEOUT_SECONDS = 30.0

ENV_BASE_URL = "OPS_MANAGER_BASE_URL"
ENV_PUBLIC_API_KEY = "OPS_MANAGER_PUBLIC_API_KEY"
ENV_PRIVATE_API_KEY = "OPS_MANAGER_PRIVATE_API_KEY"
ENV_SKIP_VERIFY = "OPS_MANAGER_SKIP_VERIFY"
ENV_CA_CERT_FILE = "OPS_MANAGER_CA_CERT_FILE"

RequestCompletionCallback = Callable[[httpx.Request, httpx.Response], None]
ResponseProcessedCallback = Callable[["Response"], None]


def normalize_base_url(base_url: Union[str, httpx.URL]) -> httpx.URL:
    """Parse the base URL and make sure its path ends with '/'."""
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as exc:
        raise ConfigError(f"invalid base URL {str(base_url)!r}: {exc}") from exc
    if not url.path.endswith("/"):
        url = url.copy_with(path=url.path + "/")
    return url


@dataclass(frozen=True)
class ClientConfig:
    base_url: httpx.URL = field(
        default_factory=lambda: normalize_base_url(DEFAULT_BASE_URL)
    )
    user_agent: str = DEFAULT_USER_AGENT
    with_raw: bool = False
    on_request_completed: Optional[RequestCompletionCallback] = None
    on_response_processed: Optional[ResponseProcessedCallback] = None


class ClientConfigBuilder:
    """Collects settings and produces a frozen ClientConfig."""

    def __init__(self, config: Optional[ClientConfig] = None):
        self._config = config or ClientConfig()

    def base_url(self, base_url: Union[str, httpx.URL]) -> "ClientConfigBuilder":
        self._config = replace(self._config, base_url=normalize_base_url(base_url))
        return self

    def user_agent(self, user_agent: str) -> "ClientConfigBuilder":
        # Prepended, the library identifier stays at the end.
        current = self._config.user_agent
        value = f"{user_agent} {current}" if current else user_agent
        self._config = replace(self._config, user_agent=value)
        return self

    def with_raw(self, enabled: bool = True) -> "ClientConfigBuilder":
        self._config = replace(self._config, with_raw=enabled)
        return self

    def on_request_completed(
        self, callback: RequestCompletionCallback
    ) -> "ClientConfigBuilder":
        self._config = replace(self._config, on_request_completed=callback)
        return self

    def on_response_processed(
        self, callback: ResponseProcessedCallback
    ) -> "ClientConfigBuilder":
        self._config = replace(self._config, on_response_processed=callback)
        return self

    def build(self) -> ClientConfig:
        return self._config


ClientOption = Callable[[ClientConfigBuilder], ClientConfigBuilder]


def set_base_url(base_url: Union[str, httpx.URL]) -> ClientOption:
    return lambda b: b.base_url(base_url)


def set_user_agent(user_agent: str) -> ClientOption:
    return lambda b: b.user_agent(user_agent)


def set_with_raw() -> ClientOption:
    return lambda b: b.with_raw(True)


def set_on_request_completed(callback: RequestCompletionCallback) -> ClientOption:
    return lambda b: b.on_request_completed(callback)


def set_on_response_processed(callback: ResponseProcessedCallback) -> ClientOption:
    return lambda b: b.on_response_processed(callback)


def build_config(*options: ClientOption) -> ClientConfig:
    builder = ClientConfigBuilder()
    for option in options:
        option(builder)
    return builder.build()


def tls_verify(
    *, skip_verify: bool = False, ca_cert: Optional[str] = None
) -> Union[bool, ssl.SSLContext]:
    """httpx `verify` value: False, a context trusting a PEM CA, or True."""
    if skip_verify:
        return False
    if ca_cert:
        try:
            return ssl.create_default_context(cadata=ca_cert)
        except (ssl.SSLError, ValueError) as exc:
            raise ConfigError(f"invalid CA certificate: {exc}") from exc
    return True


def create_http_client(
    public_key: str,
    private_key: str,
    *,
    skip_verify: bool = False,
    ca_cert: Optional[str] = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> httpx.AsyncClient:
    """Transport authenticating with programmatic API keys over HTTP digest."""
    if not public_key or not private_key:
        raise ConfigError("public_key and private_key must be provided.")
    return httpx.AsyncClient(
        auth=httpx.DigestAuth(public_key, private_key),
        verify=tls_verify(skip_verify=skip_verify, ca_cert=ca_cert),
        timeout=timeout_seconds,
    )


def load_env_config(*, use_dotenv: bool = True) -> Tuple[str, str, str]:
    """Load base URL, public key and private key from environment (optional .env)."""
    if use_dotenv:
        load_dotenv()
    base_url = os.getenv(ENV_BASE_URL, "").strip()
    public_key = os.getenv(ENV_PUBLIC_API_KEY, "").strip()
    private_key = os.getenv(ENV_PRIVATE_API_KEY, "").strip()
    return base_url, public_key, private_key


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


def http_client_from_env(*, use_dotenv: bool = True) -> httpx.AsyncClient:
    _, public_key, private_key = load_env_config(use_dotenv=use_dotenv)
    if not public_key or not private_key:
        raise ConfigError(
            f"Missing {ENV_PUBLIC_API_KEY} or {ENV_PRIVATE_API_KEY} in environment."
        )

    ca_cert: Optional[str] = None
    ca_file = os.getenv(ENV_CA_CERT_FILE, "").strip()
    if ca_file:
        try:
            with open(ca_file, encoding="utf-8") as fh:
                ca_cert = fh.read()
        except OSError as exc:
            raise ConfigError(f"cannot read CA certificate {ca_file!r}: {exc}") from exc

    return create_http_client(
        public_key,
        private_key,
        skip_verify=_env_flag(ENV_SKIP_VERIFY),
        ca_cert=ca_cert,
    )


def config_from_env(*options: ClientOption, use_dotenv: bool = True) -> ClientConfig:
    """Config with the environment base URL (if any) applied before `options`."""
    base_url, _, _ = load_env_config(use_dotenv=use_dotenv)
    builder = ClientConfigBuilder()
    if base_url:
        builder.base_url(base_url)
    for option in options:
        option(builder)
    return builder.build()


__all__ = [
    "VERSION",
    "CLOUD_URL",
    "DEFAULT_BASE_URL",
    "API_PUBLIC_V1_PATH",
    "DEFAULT_USER_AGENT",
    "ClientConfig",
    "ClientConfigBuilder",
    "ClientOption",
    "RequestCompletionCallback",
    "ResponseProcessedCallback",
    "normalize_base_url",
    "set_base_url",
    "set_user_agent",
    "set_with_raw",
    "set_on_request_completed",
    "set_on_response_processed",
    "build_config",
    "tls_verify",
    "create_http_client",
    "load_env_config",
    "http_client_from_env",
    "config_from_env",
]
