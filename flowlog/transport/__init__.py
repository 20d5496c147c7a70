from .base import Transport, TransportResponse
from .http import ApiKeyAuth, HttpTransport

__all__ = [
    "ApiKeyAuth",
    "HttpTransport",
    "Transport",
    "TransportResponse",
]
