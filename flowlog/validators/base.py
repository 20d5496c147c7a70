"""
Transaction validator definitions.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowlog.config import AgentConfig
    from flowlog.models import Transaction


class TransactionValidator(ABC):
    """
    Abstract base class for transaction validators.

    Concrete validators check one precondition against the configuration
    snapshot and raise :class:`flowlog.errors.TransactionValidationError`
    when it does not hold.
    """

    def __init__(self, config: "AgentConfig"):
        self.config = config

    @abstractmethod
    def validate(self, transaction: "Transaction") -> None:
        """
        Validate a transaction.

        Args:
            transaction: The transaction to check

        Raises:
            TransactionValidationError: If the transaction is not valid
        """
        pass
