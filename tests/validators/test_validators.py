import unittest
from unittest.mock import MagicMock

import pytest

from flowlog.errors import TransactionValidationError
from flowlog.models import Transaction
from flowlog.validators import (
    ApplicationValidator,
    IdTypeValidator,
    OperationValidator,
    TransactionValidator,
    default_validators,
)


class TestApplicationValidator(unittest.TestCase):
    """
    Test cases for the application validator.
    """

    @pytest.fixture(autouse=True)
    def _setup(self, config_factory):
        self.config = config_factory()
        self.validator = ApplicationValidator(self.config)
        self.txn = Transaction(self.config)
        self.txn.from_key = "app01"
        self.txn.to_key = "app02"

    def test_registered_applications_pass(self):
        self.validator.validate(self.txn)

    def test_missing_from_fails(self):
        self.txn.from_key = None
        with self.assertRaises(TransactionValidationError) as ctx:
            self.validator.validate(self.txn)
        self.assertEqual(str(ctx.exception), "from does not exist!")

    def test_blank_to_fails(self):
        self.txn.to_key = "   "
        with self.assertRaises(TransactionValidationError) as ctx:
            self.validator.validate(self.txn)
        self.assertEqual(str(ctx.exception), "to does not exist!")

    def test_unknown_from_fails(self):
        self.txn.from_key = "app03"
        with self.assertRaises(TransactionValidationError) as ctx:
            self.validator.validate(self.txn)
        self.assertIn("from application does not exist: app03", str(ctx.exception))

    def test_unknown_to_fails(self):
        self.txn.to_key = "app03"
        with self.assertRaises(TransactionValidationError) as ctx:
            self.validator.validate(self.txn)
        self.assertIn("to application does not exist: app03", str(ctx.exception))


class TestIdTypeValidator:
    """
    Tests for the id type validator.
    """

    def test_no_ids_pass(self, transaction) -> None:
        IdTypeValidator(transaction.config).validate(transaction)

    def test_registered_id_types_pass(self, transaction) -> None:
        transaction.add_ids_by_type_key("id01", ["1"])
        transaction.add_id_type_key("id02")
        IdTypeValidator(transaction.config).validate(transaction)

    def test_unknown_id_type_fails(self, transaction) -> None:
        transaction.add_ids_by_type_key("id01", ["1"])
        transaction.add_ids_by_type_key("id99", ["2"])

        with pytest.raises(TransactionValidationError, match="IdType not found: id99"):
            IdTypeValidator(transaction.config).validate(transaction)


class TestOperationValidator:
    """
    Tests for the operation validator.
    """

    def test_absent_operation_is_valid(self, transaction) -> None:
        transaction.operation_key = None
        OperationValidator(transaction.config).validate(transaction)

    def test_registered_operation_is_valid(self, transaction) -> None:
        transaction.operation_key = "op01"
        OperationValidator(transaction.config).validate(transaction)

    def test_unknown_operation_fails(self, transaction) -> None:
        transaction.operation_key = "op99"
        with pytest.raises(TransactionValidationError, match="Operation does not exist: op99"):
            OperationValidator(transaction.config).validate(transaction)

    def test_empty_operation_key_is_checked(self, transaction) -> None:
        transaction.operation_key = ""
        with pytest.raises(TransactionValidationError):
            OperationValidator(transaction.config).validate(transaction)


def test_default_chain_order(config):
    chain = default_validators(config)

    assert [type(v) for v in chain] == [
        OperationValidator,
        IdTypeValidator,
        ApplicationValidator,
    ]
    assert all(v.config is config for v in chain)


def test_validators_do_not_touch_the_transaction(transaction):
    transaction.operation_key = "op01"
    transaction.add_ids_by_type_key("id01", ["1"])
    transaction.add_metadata("k", "v")
    before = (list(transaction.metadata), dict(transaction.ids), transaction.timestamp)

    for validator in default_validators(transaction.config):
        validator.validate(transaction)

    assert (list(transaction.metadata), dict(transaction.ids), transaction.timestamp) == before


def test_validator_base_is_abstract(config):
    with pytest.raises(TypeError):
        TransactionValidator(config)  # type: ignore[abstract]

    custom = MagicMock(spec=TransactionValidator)
    custom.validate(None)
    custom.validate.assert_called_once_with(None)
