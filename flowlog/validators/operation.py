from flowlog.errors import TransactionValidationError

from .base import TransactionValidator


class OperationValidator(TransactionValidator):
    """
    The operation is optional, but when set it must be registered.
    """

    def validate(self, transaction) -> None:
        key = transaction.operation_key
        if key is not None and not self.config.operations.entry_exists(key):
            raise TransactionValidationError(f"Operation does not exist: {key}")
