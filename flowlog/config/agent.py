from dataclasses import dataclass, field
from typing import Optional

from flowlog.constants import DEFAULT_SEND_INTERVAL_MS, DEFAULT_SIZE_THRESHOLD
from flowlog.errors import InvalidAgentConfigError

from .proxy import ProxyConfig
from .registry import KeyNameElementType, KeyNameRegistry


@dataclass
class AgentConfig:
    """
    Agent configuration snapshot.

    The agent core only reads from it; it is treated as immutable for the
    lifetime of an agent.
    """

    enabled: bool = False
    log_service_uri: Optional[str] = None
    api_key: Optional[str] = None
    send_interval: int = DEFAULT_SEND_INTERVAL_MS
    size_threshold: int = DEFAULT_SIZE_THRESHOLD
    gzip_enabled: bool = False
    proxy: Optional[ProxyConfig] = None
    operations: KeyNameRegistry = field(default_factory=KeyNameRegistry)
    applications: KeyNameRegistry = field(default_factory=KeyNameRegistry)
    id_types: KeyNameRegistry = field(default_factory=KeyNameRegistry)
    payload_types: KeyNameRegistry = field(default_factory=KeyNameRegistry)

    @property
    def send_interval_seconds(self) -> float:
        return self.send_interval / 1000.0

    def get(self, element_type: KeyNameElementType) -> KeyNameRegistry:
        """
        Get the registry for the given key/name element type.
        """
        registries = {
            KeyNameElementType.OPERATIONS: self.operations,
            KeyNameElementType.APPLICATIONS: self.applications,
            KeyNameElementType.ID_TYPES: self.id_types,
            KeyNameElementType.PAYLOAD_TYPES: self.payload_types,
        }
        try:
            return registries[KeyNameElementType(element_type)]
        except ValueError:
            raise InvalidAgentConfigError(reason=f"Invalid key/name element: {element_type}")

    def validate(self) -> None:
        """
        Check that an enabled configuration carries everything needed to send.

        Raises:
            InvalidAgentConfigError: If a required field is missing or out of range.
        """
        if self.send_interval < 0:
            raise InvalidAgentConfigError(reason="Send interval must not be negative.")
        if self.size_threshold < 0:
            raise InvalidAgentConfigError(reason="Size threshold must not be negative.")

        if not self.enabled:
            return

        if not self.log_service_uri:
            raise InvalidAgentConfigError(reason="Log service URI is required.")
        if not self.api_key:
            raise InvalidAgentConfigError(reason="API key is required.")
