from typing import Optional


class FlowlogError(Exception):
    """
    Generic flowlog agent error.

    Args:
        message (str): The error message.
    """
    def __init__(self, message: str = "An error occurred in the flowlog agent."):
        self.message = message
        super().__init__(self.message)


class InvalidAgentConfigError(FlowlogError):
    """
    Error raised when the agent configuration is missing or invalid.

    Args:
        reason (Optional[str]): The reason for the error.
        message (str): The error message template.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Invalid agent configuration."):
        self.reason = reason
        info = f" {reason}" if reason else ""
        super().__init__(message + info)


class TransactionValidationError(FlowlogError):
    """
    Error raised when a transaction fails validation and is not admitted.

    Args:
        message (str): Describes exactly which precondition failed.
    """
    def __init__(self, message: str = "Transaction is not valid."):
        super().__init__(message)


class WireConversionError(FlowlogError):
    """
    Error raised when a transaction cannot be converted to its wire record.
    """
    def __init__(self, message: str = "Unable to convert transaction to wire format."):
        super().__init__(message)


class SerializationError(FlowlogError):
    """
    Error raised when a batch of transactions cannot be encoded for sending.

    Args:
        reason (Optional[str]): The reason for the error.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Failed to serialize transactions."):
        self.reason = reason
        info = f" Details: {reason}" if reason else ""
        super().__init__(message + info)


class TransportError(FlowlogError):
    """
    Error raised when the transport cannot deliver a payload.

    Args:
        reason (Optional[str]): The reason for the error.
        message (str): The error message template.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Failed to deliver transactions."):
        self.reason = reason
        info = f" Reason: {reason}" if reason else ""
        super().__init__(message + info)


class NetworkConnectionError(TransportError):
    """
    Error raised when a network connection issue is encountered.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Check your network connection, unable to reach the log service."):
        super().__init__(reason=reason, message=message)


class RequestTimeoutError(TransportError):
    """
    Error raised when a request to the log service times out.
    """
    def __init__(self, reason: Optional[str] = None,
                 message: str = "Request to the log service timed out."):
        super().__init__(reason=reason, message=message)
