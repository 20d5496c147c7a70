import os
from pathlib import Path

USER_CONFIG_DIR = Path("~", ".flowlog").expanduser()
CONFIG_FILE_NAME = "agent.ini"

# Fetch the agent config path from the environment, defaulting to ~/.flowlog/agent.ini
CONFIG = Path(os.getenv("FLOWLOG_CONFIG_PATH", str(USER_CONFIG_DIR / CONFIG_FILE_NAME)))

# Fetch the REQUEST_TIMEOUT from the environment variable, defaulting to 30 if not set
REQUEST_TIMEOUT = int(os.getenv("FLOWLOG_REQUEST_TIMEOUT", 30))

OVERLOAD_CHECK_INTERVAL = float(os.getenv("FLOWLOG_OVERLOAD_CHECK_INTERVAL", 5))

# Sender retry policy
MAX_RETRIES = 4

# Elastic scale-out
MAX_SENDER_WORKERS = 5
OVERLOAD_FACTOR = 1.3

# Service defaults
DEFAULT_SEND_INTERVAL_MS = 5000
DEFAULT_SIZE_THRESHOLD = 30

AUTHORIZATION_HEADER = "Authorization"
AUTHORIZATION_SCHEME = "apikey"

# Transaction status conventions
STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"
STATUS_UNKNOWN = "unknown"
