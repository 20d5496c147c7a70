"""
Client-side agent shipping transaction logs to a remote log service.
"""

from .agent import Agent, AgentFactory
from .buffer import TransactionBuffer
from .config import AgentConfig, KeyNameRegistry, agent_config_from_dict, load_agent_config
from .errors import (
    FlowlogError,
    InvalidAgentConfigError,
    TransactionValidationError,
    TransportError,
)
from .models import Transaction, WireRecord
from .transport import HttpTransport, Transport, TransportResponse

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentFactory",
    "FlowlogError",
    "HttpTransport",
    "InvalidAgentConfigError",
    "KeyNameRegistry",
    "Transaction",
    "TransactionBuffer",
    "TransactionValidationError",
    "Transport",
    "TransportError",
    "TransportResponse",
    "WireRecord",
    "agent_config_from_dict",
    "load_agent_config",
]
