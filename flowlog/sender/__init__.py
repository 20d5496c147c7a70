from .status import SendOutcome, SendStatus
from .worker import Action, Sender, SenderMetrics, encode_batch

__all__ = [
    "Action",
    "SendOutcome",
    "SendStatus",
    "Sender",
    "SenderMetrics",
    "encode_batch",
]
