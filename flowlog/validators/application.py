from flowlog.errors import TransactionValidationError

from .base import TransactionValidator


def _is_blank(value) -> bool:
    return value is None or not str(value).strip()


class ApplicationValidator(TransactionValidator):
    """
    Both ends of a transaction must be set and be registered applications.
    """

    def validate(self, transaction) -> None:
        if _is_blank(transaction.from_key):
            raise TransactionValidationError("from does not exist!")
        if _is_blank(transaction.to_key):
            raise TransactionValidationError("to does not exist!")

        if not self.config.applications.entry_exists(transaction.from_key):
            raise TransactionValidationError(
                f"from application does not exist: {transaction.from_key}"
            )
        if not self.config.applications.entry_exists(transaction.to_key):
            raise TransactionValidationError(
                f"to application does not exist: {transaction.to_key}"
            )
