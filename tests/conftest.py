import threading
from typing import List, Sequence

import pytest

from flowlog.config import AgentConfig, KeyNameRegistry
from flowlog.transport import TransportResponse


def make_config(**overrides) -> AgentConfig:
    values = dict(
        enabled=True,
        log_service_uri="https://logs.example.com/rest/v2.0/transaction",
        api_key="secret-key",
        send_interval=20,
        size_threshold=1,
        gzip_enabled=False,
        applications=KeyNameRegistry({"app01": "Billing", "app02": "Warehouse"}),
        operations=KeyNameRegistry({"op01": "Update customer"}),
        id_types=KeyNameRegistry({"id01": "Customer number", "id02": "Order number"}),
        payload_types=KeyNameRegistry({"pt01": "Invoice"}),
    )
    values.update(overrides)
    return AgentConfig(**values)


class RecordingTransport:
    """
    Transport double answering from a scripted list of status codes.

    The last code repeats once the script runs out.
    """

    def __init__(self, statuses: Sequence[int] = (202,)):
        self.statuses = list(statuses)
        self.payloads: List[bytes] = []
        self.closed = False
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.payloads)

    def send(self, payload: bytes) -> TransportResponse:
        with self._lock:
            self.payloads.append(payload)
            index = min(len(self.payloads), len(self.statuses)) - 1
            status = self.statuses[index]
        return TransportResponse(status_code=status, body="OK" if status < 300 else "nope")

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def transport_factory():
    return RecordingTransport


@pytest.fixture
def config() -> AgentConfig:
    return make_config()


@pytest.fixture
def batching_config() -> AgentConfig:
    return make_config(size_threshold=10)


@pytest.fixture
def transaction(config):
    from flowlog.models import Transaction

    txn = Transaction(config)
    txn.from_key = "app01"
    txn.to_key = "app02"
    txn.status = "success"
    txn.message = "Customer updated"
    return txn
