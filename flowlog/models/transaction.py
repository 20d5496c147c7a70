import time
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, NamedTuple, Optional

if TYPE_CHECKING:
    from flowlog.config import AgentConfig


class NameValuePair(NamedTuple):
    """
    A single metadata entry of a transaction.
    """

    name: str
    value: str


class TransactionField(str, Enum):
    """
    Scalar transaction fields and their names on the wire.
    """

    TO = "to"
    FROM = "from"
    OPERATION = "operation"
    MESSAGE = "message"
    STATUS = "status"
    TIMESTAMP = "timestamp"
    PAYLOAD_TYPE = "payloadType"
    FLOW_ID = "flowId"


def _now_millis() -> int:
    return int(time.time() * 1000)


class Transaction:
    """
    One logged event between two applications.

    Created through :meth:`flowlog.agent.Agent.new_transaction`, populated by
    the caller and handed back with :meth:`flowlog.agent.Agent.add_transaction`.
    Keys are resolved to human readable names through the agent configuration
    it is bound to.
    """

    def __init__(self, config: "AgentConfig"):
        self.config = config

        self.to_key: Optional[str] = None
        self.from_key: Optional[str] = None
        self.operation_key: Optional[str] = None
        self.payload_type_key: Optional[str] = None
        self.message: Optional[str] = None
        self.status: Optional[str] = None
        self.flow_id: Optional[str] = None

        self._timestamp = _now_millis()
        self._ids: Dict[str, List[str]] = {}
        self._metadata: List[NameValuePair] = []

    @property
    def timestamp(self) -> int:
        """
        Creation time in epoch milliseconds.
        """
        return self._timestamp

    @property
    def ids(self) -> Dict[str, List[str]]:
        return self._ids

    @property
    def metadata(self) -> List[NameValuePair]:
        return self._metadata

    def get_field_value(self, field: TransactionField) -> Any:
        """
        Get the wire value of a scalar field, resolving keys to names.
        """
        field = TransactionField(field)

        if field is TransactionField.TO:
            return self.config.applications.get_entry(self.to_key)
        if field is TransactionField.FROM:
            return self.config.applications.get_entry(self.from_key)
        if field is TransactionField.OPERATION:
            return self.config.operations.get_entry(self.operation_key)
        if field is TransactionField.PAYLOAD_TYPE:
            return self.config.payload_types.get_entry(self.payload_type_key)
        if field is TransactionField.MESSAGE:
            return self.message
        if field is TransactionField.STATUS:
            return self.status
        if field is TransactionField.TIMESTAMP:
            return self._timestamp
        return self.flow_id

    def get_id_type_name(self, key: str) -> Optional[str]:
        return self.config.id_types.get_entry(key)

    def get_ids_by_type(self, type_key: str) -> Optional[List[str]]:
        return self._ids.get(type_key)

    def add_id_type_key(self, type_key: str) -> List[str]:
        """
        Start a new, empty id list for ``type_key``, replacing any existing one.
        """
        ids: List[str] = []
        self._ids[type_key] = ids
        return ids

    def add_ids_by_type_key(self, type_key: str, ids: Iterable[str]) -> List[str]:
        """
        Append ids to the list of ``type_key``, creating it when missing.
        """
        values = self._ids.setdefault(type_key, [])
        values.extend(ids)
        return values

    def add_metadata(self, name: str, value: str) -> None:
        """
        Add a metadata entry. An existing entry with the same name is replaced.
        """
        self._metadata = [nvp for nvp in self._metadata if nvp.name != name]
        self._metadata.append(NameValuePair(name, value))

    def __repr__(self) -> str:
        return (
            f"Transaction(from={self.from_key!r}, to={self.to_key!r}, "
            f"operation={self.operation_key!r}, status={self.status!r}, "
            f"flow_id={self.flow_id!r})"
        )
