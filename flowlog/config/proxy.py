import logging
from typing import Mapping, NamedTuple, Optional, Union

from .log_codes import (
    PROXY_HOST_EMPTY,
    PROXY_NOT_DEFINED,
    PROXY_PROTOCOL_INVALID,
    PROXY_RESOLVED,
)

logger = logging.getLogger(__name__)


DEFAULT_PROXY_PORT: int = 80
DEFAULT_PROXY_SCHEME: str = "http"
PROXY_ALLOWED_PROTOCOLS = ("http", "https")

PROXY_PROTOCOL_KEY = "protocol"
PROXY_HOST_KEY = "host"
PROXY_PORT_KEY = "port"


class ProxyEndpoint(NamedTuple):
    scheme: str
    host: str
    port: int

    def as_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    def as_dict(self) -> dict[str, Union[str, int]]:
        return {
            PROXY_PROTOCOL_KEY: self.scheme,
            PROXY_HOST_KEY: self.host,
            PROXY_PORT_KEY: str(self.port),
        }


class ProxyConfig(NamedTuple):
    endpoint: ProxyEndpoint

    def as_url(self) -> str:
        return self.endpoint.as_url()

    def as_dict(self) -> dict[str, Union[str, int]]:
        return self.endpoint.as_dict()


def _should_build_proxy_config(
    host: Optional[str],
    *other_values,
    source: str,
) -> bool:
    """
    Return True if the proxy config should be built, False otherwise.

    Args:
        host (Optional[str]): The proxy host.
        *other_values: Other values that may be provided.
        source (str): The source of the values.

    Returns:
        bool: True if the proxy config should be built, False otherwise.
    """

    if not host or not host.strip():
        if any(v is not None for v in other_values):
            raise ValueError(
                f"Proxy host must be provided when using other proxy options in {source}."
            )
        return False

    return True


def build_proxy_config(
    host: str,
    port: Optional[int] = None,
    scheme: Optional[str] = None,
    source: str = "unknown",
) -> ProxyConfig:
    if not host or not host.strip():
        logger.error(PROXY_HOST_EMPTY, extra={"source": source})
        raise ValueError("Proxy host must not be empty")

    host = host.strip()

    scheme = (scheme or DEFAULT_PROXY_SCHEME).lower()
    if scheme not in PROXY_ALLOWED_PROTOCOLS:
        logger.error(
            PROXY_PROTOCOL_INVALID, extra={"protocol": scheme, "source": source}
        )
        raise ValueError(f"Invalid proxy protocol: {scheme!r}")

    port = port or DEFAULT_PROXY_PORT

    endpoint = ProxyEndpoint(
        scheme=scheme,
        host=host,
        port=port,
    )

    logger.debug(PROXY_RESOLVED, extra={"source": source, "proxy": endpoint.as_url()})
    return ProxyConfig(endpoint=endpoint)


def proxy_from_mapping(
    values: Optional[Mapping[str, object]], source: str = "config"
) -> Optional[ProxyConfig]:
    """
    Build a proxy configuration from a ``host``/``port``/``protocol`` mapping.

    Returns:
        Optional[ProxyConfig]: The proxy configuration, or None if no proxy is defined.

    Raises:
        ValueError: If the proxy values are invalid.
    """
    if not values:
        logger.debug(PROXY_NOT_DEFINED, extra={"source": source})
        return None

    host_raw = values.get(PROXY_HOST_KEY)
    port_raw = values.get(PROXY_PORT_KEY)
    scheme_raw = values.get(PROXY_PROTOCOL_KEY)

    if not _should_build_proxy_config(
        str(host_raw) if host_raw is not None else None,
        port_raw,
        scheme_raw,
        source=source,
    ):
        logger.debug(PROXY_NOT_DEFINED, extra={"source": source})
        return None

    port_val = None
    if port_raw is not None and port_raw != "":
        try:
            port_val = int(port_raw)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ValueError("Proxy port must be an integer")

    return build_proxy_config(
        host=str(host_raw),
        port=port_val,
        scheme=str(scheme_raw) if scheme_raw else None,
        source=source,
    )
