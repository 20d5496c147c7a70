import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from flowlog import Agent, AgentFactory
from flowlog.constants import MAX_SENDER_WORKERS
from flowlog.errors import InvalidAgentConfigError, TransactionValidationError
from flowlog.models import WireBatch

AGENT_CONFIG = """
[service]
enabled = true
uri = https://logs.example.com/rest/v2.0/transaction
api_key = secret
interval = 20
size_threshold = 1

[applications]
app01 = Billing
app02 = Warehouse
"""


def sent_records(transport) -> list:
    records = []
    for payload in transport.payloads:
        records.extend(WireBatch.from_json(payload).transactions)
    return records


@pytest.fixture
def recording_transport(transport_factory):
    return transport_factory([202])


@pytest.fixture
def agent(config, recording_transport):
    agent = Agent(config, transport=recording_transport, overload_check_interval=60)
    yield agent
    agent.stop(timeout=10)


class TestAgentLifecycle:
    """
    Tests for starting and stopping the agent.
    """

    def test_sends_every_transaction_before_stopping(self, agent, recording_transport) -> None:
        agent.start()
        for i in range(10):
            transaction = agent.new_transaction()
            transaction.from_key = "app01"
            transaction.to_key = "app02"
            transaction.message = f"message {i}"
            agent.add_transaction(transaction)

        agent.stop(timeout=10)

        assert recording_transport.call_count == 10
        records = sent_records(recording_transport)
        assert sorted(r.message for r in records) == sorted(f"message {i}" for i in range(10))
        assert {r.from_ for r in records} == {"Billing"}
        assert {r.to for r in records} == {"Warehouse"}
        assert agent.buffer.is_empty()
        assert agent.worker_count == 0
        assert agent.running is False

    def test_start_is_idempotent(self, agent) -> None:
        agent.start()
        agent.start()

        assert agent.worker_count == 1
        assert agent.running is True

    def test_initial_workers(self, config, recording_transport) -> None:
        agent = Agent(
            config, transport=recording_transport, initial_workers=3, overload_check_interval=60
        )
        agent.start()
        try:
            assert agent.worker_count == 3
        finally:
            agent.stop(timeout=10)

    @pytest.mark.parametrize("initial, maximum", [(0, 5), (3, 2)])
    def test_invalid_worker_counts(self, config, initial, maximum) -> None:
        with pytest.raises(InvalidAgentConfigError):
            Agent(config, initial_workers=initial, max_workers=maximum)

    def test_invalid_config_is_rejected(self, config_factory) -> None:
        with pytest.raises(InvalidAgentConfigError):
            Agent(config_factory(api_key=None))

    def test_injected_transport_is_not_closed(self, agent, recording_transport) -> None:
        agent.start()
        agent.stop(timeout=10)

        assert recording_transport.closed is False

    def test_context_manager(self, config, recording_transport, transaction) -> None:
        with Agent(config, transport=recording_transport, overload_check_interval=60) as agent:
            assert agent.running
            agent.add_transaction(transaction)

        assert recording_transport.call_count == 1
        assert agent.running is False


class TestAgentTransactions:
    """
    Tests for validating and queueing transactions.
    """

    def test_valid_transaction_is_buffered(self, agent, transaction) -> None:
        agent.add_transaction(transaction)

        assert agent.buffer.size() == 1

    def test_invalid_transaction_is_not_buffered(self, agent, transaction) -> None:
        transaction.from_key = "app99"

        with pytest.raises(TransactionValidationError) as exc_info:
            agent.add_transaction(transaction)

        assert exc_info.value.message == "from application does not exist: app99"
        assert agent.buffer.size() == 0

    def test_validators_run_in_order(self, agent, transaction) -> None:
        transaction.operation_key = "op99"
        transaction.from_key = "app99"

        with pytest.raises(TransactionValidationError) as exc_info:
            agent.add_transaction(transaction)

        assert exc_info.value.message == "Operation does not exist: op99"

    def test_disabled_agent_ignores_transactions(self, config_factory, transaction) -> None:
        validator = Mock()
        agent = Agent(config_factory(enabled=False), validators=[validator])

        agent.start()
        agent.add_transaction(transaction)

        validator.validate.assert_not_called()
        assert agent.buffer.size() == 0
        assert agent.running is False
        assert agent.worker_count == 0

    def test_custom_validators(self, config, recording_transport, transaction) -> None:
        validator = Mock()
        agent = Agent(config, transport=recording_transport, validators=[validator])

        agent.add_transaction(transaction)

        validator.validate.assert_called_once_with(transaction)
        assert agent.buffer.size() == 1

    def test_exists_checks(self, agent) -> None:
        assert agent.application_exists("app01")
        assert not agent.application_exists("app99")
        assert agent.operation_exists("op01")
        assert agent.id_type_exists("id02")
        assert agent.payload_type_exists("pt01")
        assert not agent.payload_type_exists(None)

    def test_new_transaction_is_bound_to_config(self, agent) -> None:
        transaction = agent.new_transaction()
        assert transaction.config is agent.config


class TestAgentWorkers:
    """
    Tests for adding sender workers under load.
    """

    def test_increase_workers_is_capped(self, agent) -> None:
        agent.start()

        added = [agent.increase_workers() for _ in range(10)]

        assert added.count(True) == MAX_SENDER_WORKERS - 1
        assert agent.worker_count == MAX_SENDER_WORKERS

    def test_increase_workers_requires_running_agent(self, agent) -> None:
        assert agent.increase_workers() is False
        assert agent.worker_count == 0

    def test_overload_adds_workers_up_to_cap(self, agent) -> None:
        agent.start()

        agent.monitor.buffer = Mock(
            is_empty=Mock(return_value=False), size=Mock(return_value=100)
        )
        for _ in range(10):
            agent.monitor.check()

        assert agent.worker_count == MAX_SENDER_WORKERS

    def test_stats(self, agent) -> None:
        agent.start()

        stats = agent.get_stats()

        assert stats["enabled"] is True
        assert stats["running"] is True
        assert stats["workers"] == 1
        assert stats["buffer"]["size"] == 0
        assert len(stats["senders"]) == 1
        json.dumps(stats)


class TestAgentFactory:
    def test_build_from_config(self, config, recording_transport) -> None:
        agent = (
            AgentFactory()
            .set_config(config)
            .set_transport(recording_transport)
            .set_options(overload_check_interval=60)
            .build(start=False)
        )

        assert agent.config is config
        assert agent.transport is recording_transport
        assert agent.running is False

    def test_build_from_file(self, tmp_path: Path, recording_transport) -> None:
        config_path = tmp_path / "agent.ini"
        config_path.write_text(AGENT_CONFIG, encoding="utf-8")

        agent = (
            AgentFactory()
            .set_config_path(config_path)
            .set_transport(recording_transport)
            .set_options(overload_check_interval=60)
            .build()
        )
        try:
            assert agent.running
            assert agent.application_exists("app02")
        finally:
            agent.stop(timeout=10)

    def test_build_without_config(self) -> None:
        with pytest.raises(InvalidAgentConfigError) as exc_info:
            AgentFactory().build()

        assert "No configuration specified!" in exc_info.value.message
