"""
Serialization-ready projection of transactions.

A :class:`WireRecord` is built once from a :class:`Transaction`, with every key
resolved to its configured name, and never changes afterwards.
"""

import json
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flowlog.errors import SerializationError, WireConversionError

from .transaction import TransactionField

if TYPE_CHECKING:
    from .transaction import Transaction


class IdList(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id_type: str = Field(alias="idType")
    values: List[str] = Field(default_factory=list)


class WireNameValuePair(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: Optional[str] = None


class WireRecord(BaseModel):
    """
    Immutable, name-resolved transaction as sent to the log service.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: str = ""
    from_: str = Field(default="", alias="from")
    operation: str = ""
    message: str = ""
    status: str = ""
    timestamp: int
    payload_type: str = Field(default="", alias="payloadType")
    flow_id: str = Field(default="", alias="flowId")
    ids: List[IdList] = Field(default_factory=list)
    metadata: List[WireNameValuePair] = Field(default_factory=list)
    size: int = Field(default=0, exclude=True)

    @field_validator(
        "to", "from_", "operation", "message", "status", "payload_type", "flow_id",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @classmethod
    def from_transaction(cls, transaction: "Transaction") -> "WireRecord":
        """
        Build the wire record of a transaction.

        Raises:
            WireConversionError: If an id type key has no configured name or two
                id type keys resolve to the same name.
        """
        fields = {
            field.value: transaction.get_field_value(field) for field in TransactionField
        }

        id_lists: List[IdList] = []
        seen_types = set()
        for type_key, values in transaction.ids.items():
            name = transaction.get_id_type_name(type_key)
            if name is None:
                raise WireConversionError(f"IdType not found: {type_key}")
            if name in seen_types:
                raise WireConversionError(
                    f"Duplicate IdList in a transaction for id type: {name}"
                )
            seen_types.add(name)
            id_lists.append(IdList(id_type=name, values=list(values)))

        metadata = [
            WireNameValuePair(name=nvp.name, value=nvp.value)
            for nvp in transaction.metadata
        ]

        try:
            record = cls(**fields, ids=id_lists, metadata=metadata)
        except ValidationError as e:
            raise WireConversionError(f"Invalid transaction: {e}") from e

        return record.model_copy(update={"size": len(record.to_json())})

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class WireBatch(BaseModel):
    """
    The request body sent to the log service.
    """

    transactions: List[WireRecord] = Field(default_factory=list)

    def to_json(self) -> str:
        """
        Raises:
            SerializationError: If the batch cannot be encoded.
        """
        try:
            return self.model_dump_json(by_alias=True)
        except (ValueError, TypeError) as e:
            raise SerializationError(reason=str(e)) from e

    @classmethod
    def from_json(cls, data) -> "WireBatch":
        """
        Decode a request body back into records.

        Raises:
            SerializationError: If the body is not a valid batch.
        """
        try:
            return cls.model_validate_json(data)
        except (ValidationError, json.JSONDecodeError) as e:
            raise SerializationError(reason=str(e)) from e
