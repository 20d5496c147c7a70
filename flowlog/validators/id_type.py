from flowlog.errors import TransactionValidationError

from .base import TransactionValidator


class IdTypeValidator(TransactionValidator):
    """
    Every id type key used by a transaction must be registered.
    """

    def validate(self, transaction) -> None:
        for type_key in transaction.ids:
            if not self.config.id_types.entry_exists(type_key):
                raise TransactionValidationError(f"IdType not found: {type_key}")
