from .agent import AgentConfig
from .loader import agent_config_from_dict, load_agent_config
from .proxy import ProxyConfig, ProxyEndpoint, build_proxy_config
from .registry import KeyNameElementType, KeyNameRegistry

__all__ = [
    "AgentConfig",
    "KeyNameElementType",
    "KeyNameRegistry",
    "ProxyConfig",
    "ProxyEndpoint",
    "agent_config_from_dict",
    "build_proxy_config",
    "load_agent_config",
]
