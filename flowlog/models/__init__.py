from .transaction import NameValuePair, Transaction, TransactionField
from .wire import IdList, WireBatch, WireNameValuePair, WireRecord

__all__ = [
    "IdList",
    "NameValuePair",
    "Transaction",
    "TransactionField",
    "WireBatch",
    "WireNameValuePair",
    "WireRecord",
]
