"""
Building an :class:`AgentConfig` from an INI file or an in-memory mapping.

Expected layout::

    [service]
    enabled = true
    uri = https://logs.example.com/rest/v2.0/transaction
    api_key = secret
    interval = 1000
    size_threshold = 30
    gzip_enabled = false

    [proxy]
    host = proxy.example.com
    port = 8080

    [applications]
    app01 = Billing
    app02 = Warehouse

    [operations]
    [id_types]
    [payload_types]
"""

import configparser
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from flowlog.constants import CONFIG, DEFAULT_SEND_INTERVAL_MS, DEFAULT_SIZE_THRESHOLD
from flowlog.errors import InvalidAgentConfigError
from flowlog.logs_helpers import log_call

from .agent import AgentConfig
from .log_codes import (
    AGENT_DISABLED,
    AGENT_DUPLICATE_KEY,
    AGENT_FILE_MISSING,
    AGENT_LOADED,
    AGENT_SECTION_MISSING,
)
from .proxy import proxy_from_mapping
from .registry import KeyNameElementType

logger = logging.getLogger(__name__)

SERVICE_SECTION_NAME = "service"
PROXY_SECTION_NAME = "proxy"

SERVICE_ENABLED_KEY = "enabled"
SERVICE_URI_KEY = "uri"
SERVICE_API_KEY = "api_key"
SERVICE_INTERVAL_KEY = "interval"
SERVICE_SIZE_THRESHOLD_KEY = "size_threshold"
SERVICE_GZIP_KEY = "gzip_enabled"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise InvalidAgentConfigError(reason=f"Not a boolean value for {key}: {value!r}")


def _as_int(value: Any, key: str, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidAgentConfigError(reason=f"Not an integer value for {key}: {value!r}")


def _apply_service_settings(config: AgentConfig, service: Mapping[str, Any]) -> None:
    uri = service.get(SERVICE_URI_KEY)
    api_key = service.get(SERVICE_API_KEY)

    if not uri or not api_key:
        raise InvalidAgentConfigError(
            reason="The logger config does not contain all of the required "
            "elements for the logger service configuration."
        )

    config.log_service_uri = str(uri)
    config.api_key = str(api_key)
    config.send_interval = _as_int(
        service.get(SERVICE_INTERVAL_KEY), SERVICE_INTERVAL_KEY, DEFAULT_SEND_INTERVAL_MS
    )
    config.size_threshold = _as_int(
        service.get(SERVICE_SIZE_THRESHOLD_KEY),
        SERVICE_SIZE_THRESHOLD_KEY,
        DEFAULT_SIZE_THRESHOLD,
    )
    config.gzip_enabled = _as_bool(service.get(SERVICE_GZIP_KEY, False), SERVICE_GZIP_KEY)


def _apply_key_name_settings(
    config: AgentConfig,
    entries: Optional[Mapping[str, Any]],
    element_type: KeyNameElementType,
) -> None:
    if not entries:
        return

    registry = config.get(element_type)
    for key, name in entries.items():
        if registry.entry_exists(key):
            logger.error(
                AGENT_DUPLICATE_KEY, extra={"key": key, "type": element_type.value}
            )
            raise InvalidAgentConfigError(
                reason=f"Duplicate key: {key} for type: {element_type.name}"
            )
        registry.add_entry(key, str(name))


def agent_config_from_dict(values: Mapping[str, Mapping[str, Any]]) -> AgentConfig:
    """
    Build an agent configuration from a section -> values mapping.

    The mapping uses the same section and key names as the INI file. When the
    service is disabled nothing but the enabled flag is applied.

    Raises:
        InvalidAgentConfigError: If the configuration is incomplete or invalid.
    """
    config = AgentConfig()

    service = values.get(SERVICE_SECTION_NAME)
    if service is None:
        logger.debug(AGENT_SECTION_MISSING, extra={"section": SERVICE_SECTION_NAME})
        service = {}

    enabled = _as_bool(service.get(SERVICE_ENABLED_KEY, False), SERVICE_ENABLED_KEY)

    if not enabled:
        logger.info(AGENT_DISABLED)
        return config

    _apply_service_settings(config, service)

    try:
        config.proxy = proxy_from_mapping(values.get(PROXY_SECTION_NAME))
    except ValueError as e:
        raise InvalidAgentConfigError(reason=str(e)) from e

    for element_type in KeyNameElementType:
        _apply_key_name_settings(config, values.get(element_type.value), element_type)

    config.enabled = True
    config.validate()

    logger.info(
        AGENT_LOADED,
        extra={
            "uri": config.log_service_uri,
            "applications": len(config.applications),
            "operations": len(config.operations),
        },
    )
    return config


@log_call(show_result=False)
def load_agent_config(config_path: Union[str, Path] = CONFIG) -> AgentConfig:
    """
    Read the agent configuration from an INI file.

    Args:
        config_path: Path to the INI file.

    Returns:
        AgentConfig: The resolved configuration.

    Raises:
        InvalidAgentConfigError: If the file cannot be read or is invalid.
    """
    path = Path(config_path)
    parser = configparser.ConfigParser(interpolation=None)
    # Keys are case sensitive identifiers
    parser.optionxform = str  # type: ignore[assignment,method-assign]

    try:
        read_files = parser.read(path, encoding="utf-8")
    except configparser.Error as e:
        raise InvalidAgentConfigError(reason=f"Unable to read logger config: {e}") from e

    if not read_files:
        logger.error(AGENT_FILE_MISSING, extra={"config_path": str(path)})
        raise InvalidAgentConfigError(reason=f"Config file not found: {path}")

    values = {name: dict(parser[name]) for name in parser.sections()}
    return agent_config_from_dict(values)
