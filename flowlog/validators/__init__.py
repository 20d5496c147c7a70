from typing import TYPE_CHECKING, List

from .application import ApplicationValidator
from .base import TransactionValidator
from .id_type import IdTypeValidator
from .operation import OperationValidator

if TYPE_CHECKING:
    from flowlog.config import AgentConfig


def default_validators(config: "AgentConfig") -> List[TransactionValidator]:
    """
    The validator chain in the order it runs.
    """
    return [
        OperationValidator(config),
        IdTypeValidator(config),
        ApplicationValidator(config),
    ]


__all__ = [
    "ApplicationValidator",
    "IdTypeValidator",
    "OperationValidator",
    "TransactionValidator",
    "default_validators",
]
