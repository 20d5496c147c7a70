"""
HTTP transport to the log service, built on httpx.
"""

import logging
import threading
from typing import TYPE_CHECKING, Dict, Optional

import httpx

from flowlog.constants import (
    AUTHORIZATION_HEADER,
    AUTHORIZATION_SCHEME,
    REQUEST_TIMEOUT,
)
from flowlog.errors import (
    InvalidAgentConfigError,
    NetworkConnectionError,
    RequestTimeoutError,
    TransportError,
)
from flowlog.meta import get_meta_http_headers

from .base import TransportResponse

if TYPE_CHECKING:
    from flowlog.config import AgentConfig

logger = logging.getLogger(__name__)


class ApiKeyAuth(httpx.Auth):
    """
    Auth that sends the API key in the ``Authorization: apikey <key>`` header.
    """

    def __init__(self, api_key: str):
        self.api_key = api_key

    def auth_flow(self, request):
        request.headers[AUTHORIZATION_HEADER] = f"{AUTHORIZATION_SCHEME} {self.api_key}"
        yield request


class HttpTransport:
    """
    Synchronous transport posting JSON batches to the log service.

    One instance is shared by all sender workers; the underlying
    ``httpx.Client`` is thread safe.
    """

    def __init__(
        self,
        uri: str,
        api_key: str,
        gzip_enabled: bool = False,
        proxy_url: Optional[str] = None,
        timeout: Optional[float] = REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            uri: The log service endpoint.
            api_key: The API key sent with every request.
            gzip_enabled: Whether payloads arrive gzip compressed.
            proxy_url: Optional proxy to route requests through.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mostly useful in tests.
        """
        self.uri = uri
        self.gzip_enabled = gzip_enabled
        self._api_key = api_key
        self._proxy_url = proxy_url
        self._timeout = timeout
        self._transport = transport
        self._lock = threading.Lock()
        self._http_client: Optional[httpx.Client] = None

    @classmethod
    def from_config(cls, config: "AgentConfig", **kwargs) -> "HttpTransport":
        if not config.log_service_uri or not config.api_key:
            raise InvalidAgentConfigError(
                reason="Log service URI and API key are required to send."
            )
        return cls(
            uri=config.log_service_uri,
            api_key=config.api_key,
            gzip_enabled=config.gzip_enabled,
            proxy_url=config.proxy.as_url() if config.proxy else None,
            **kwargs,
        )

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/plain",
        }
        headers.update(get_meta_http_headers())

        if self.gzip_enabled:
            headers["Content-Encoding"] = "gzip"
            headers["Accept-Encoding"] = "gzip"

        return headers

    def _create_http_client(self) -> httpx.Client:
        client_kwargs = {
            "auth": ApiKeyAuth(self._api_key),
            "headers": self._get_headers(),
            "timeout": httpx.Timeout(self._timeout),
            "trust_env": False,
        }

        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        elif self._proxy_url:
            client_kwargs["proxy"] = self._proxy_url

        return httpx.Client(**client_kwargs)

    @property
    def http_client(self) -> httpx.Client:
        with self._lock:
            if self._http_client is None:
                self._http_client = self._create_http_client()
            return self._http_client

    def send(self, payload: bytes) -> TransportResponse:
        """
        Post an encoded batch.

        Raises:
            NetworkConnectionError: If the service cannot be reached.
            RequestTimeoutError: If the request times out.
            TransportError: On any other transport level failure.
        """
        try:
            response = self.http_client.post(self.uri, content=payload)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(reason=str(e)) from e
        except httpx.ConnectError as e:
            raise NetworkConnectionError(reason=str(e)) from e
        except httpx.TransportError as e:
            raise TransportError(reason=str(e)) from e

        logger.debug("Log service responded with %s", response.status_code)
        return TransportResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        with self._lock:
            if self._http_client is not None:
                self._http_client.close()
                self._http_client = None
                logger.debug("HTTP client closed")
