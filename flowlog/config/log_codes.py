"""
Log codes for configuration-related operations.
"""

CONFIG = "config"

# Agent Configuration
AGENT = f"{CONFIG}.agent"
AGENT_LOADED = f"{AGENT}.loaded"
AGENT_DISABLED = f"{AGENT}.disabled"
AGENT_FILE_MISSING = f"{AGENT}.file_missing"
AGENT_SECTION_MISSING = f"{AGENT}.missing_section"
AGENT_DUPLICATE_KEY = f"{AGENT}.duplicate_key"

# Proxy Configuration
PROXY = f"{CONFIG}.proxy"
PROXY_RESOLVED = f"{PROXY}.resolved"
PROXY_NOT_DEFINED = f"{PROXY}.not_defined"
PROXY_HOST_EMPTY = f"{PROXY}.host_empty"
PROXY_PROTOCOL_INVALID = f"{PROXY}.invalid_protocol"
