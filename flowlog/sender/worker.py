"""
Background worker delivering buffered transactions to the log service.
"""

import gzip
import itertools
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from flowlog.errors import SerializationError, TransportError
from flowlog.models import WireBatch, WireRecord

from .status import SendOutcome, SendStatus

if TYPE_CHECKING:
    from flowlog.buffer import TransactionBuffer
    from flowlog.config import AgentConfig
    from flowlog.transport import Transport

logger = logging.getLogger(__name__)

_worker_ids = itertools.count(1)


class Action(Enum):
    RETRY = "retry"
    SEND = "send"
    NONE = "none"


@dataclass
class SenderMetrics:
    """
    Metrics for a sender worker.
    """

    attempts: int = 0
    failures: int = 0
    batches_sent: int = 0
    transactions_sent: int = 0
    batches_discarded: int = 0
    transactions_discarded: int = 0


def encode_batch(records: List[WireRecord], gzip_enabled: bool = False) -> bytes:
    """
    Encode records as the request body.

    Raises:
        SerializationError: If the records cannot be encoded.
    """
    body = WireBatch(transactions=records).to_json().encode("utf-8")
    if not gzip_enabled:
        return body

    try:
        return gzip.compress(body)
    except (OSError, ValueError) as e:
        raise SerializationError(
            reason=str(e), message="Failed to compress transactions using gzip."
        ) from e


class Sender:
    """
    Worker thread draining the transaction buffer.

    Each control loop iteration picks one action: re-send the outstanding
    batch (RETRY), drain and send a new batch (SEND), or wait for the send
    interval or an early wake-up from the buffer (NONE).

    ``stop`` is cooperative: the worker keeps going until the buffer is empty
    and no batch is waiting for a retry, then exits.
    """

    def __init__(
        self,
        config: "AgentConfig",
        buffer: "TransactionBuffer",
        transport: "Transport",
        name: Optional[str] = None,
    ):
        self.config = config
        self.buffer = buffer
        self.transport = transport
        self.name = name or f"flowlog-sender-{next(_worker_ids)}"

        self.status = SendStatus()
        self.metrics = SenderMetrics()

        self._payload: Optional[bytes] = None
        self._batch_size = 0

        self._stopping = threading.Event()
        self._wakeup = threading.Condition()
        self._thread: Optional[threading.Thread] = None

        self.buffer.add_size_observer(self.on_buffer_size_changed)

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def on_buffer_size_changed(self, new_size: int) -> None:
        if new_size >= self.config.size_threshold:
            with self._wakeup:
                self._wakeup.notify_all()

    def start(self) -> None:
        if self.is_alive:
            return

        self._stopping.clear()
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """
        Ask the worker to flush what is left and exit.
        """
        self._stopping.set()
        with self._wakeup:
            self._wakeup.notify_all()

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the worker thread to exit.

        Returns:
            bool: True if the thread has finished.
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def run(self) -> None:
        self.status.initial_status()
        logger.info("Sender %s started", self.name)

        try:
            while True:
                action = self._action()

                if action is Action.NONE and self._stopping.is_set():
                    break

                try:
                    if action is Action.RETRY:
                        self._retry()
                    elif action is Action.SEND:
                        self._send()
                    else:
                        self._sleep(self.config.send_interval_seconds)
                except Exception as e:
                    self.status.retry_last_send = False
                    self.status.retry_count = 0
                    self._finish_batch(SendOutcome.DISCARDED)
                    logger.exception(f"Sender {self.name} failed: {e}")
        finally:
            self.buffer.remove_size_observer(self.on_buffer_size_changed)
            logger.info(
                "Sender %s stopped. Total sent: %s",
                self.name,
                self.metrics.transactions_sent,
            )

    def _action(self) -> Action:
        if self.status.retry_last_send:
            return Action.RETRY

        if self.buffer.contains_data():
            return Action.SEND

        return Action.NONE

    def _sleep(self, timeout: float) -> None:
        with self._wakeup:
            if self._stopping.is_set():
                return
            self._wakeup.wait(timeout)

    def _send(self) -> None:
        batch = self.buffer.drain()
        if not batch:
            return

        try:
            self._payload = encode_batch(batch, self.config.gzip_enabled)
        except SerializationError as e:
            # The drained batch is dropped rather than requeued
            logger.error(
                f"Failed to send {len(batch)} transactions because the "
                f"serialization failed. Discarding the entries. {e}"
            )
            self.metrics.batches_discarded += 1
            self.metrics.transactions_discarded += len(batch)
            return

        self._batch_size = len(batch)
        self._perform_request()

    def _retry(self) -> None:
        self._sleep(self.config.send_interval_seconds)
        logger.debug(
            "Attempting to resend transactions (retry %s).", self.status.retry_count
        )
        self._perform_request()

    def _perform_request(self) -> None:
        if self._payload is None:
            self.status.retry_last_send = False
            self.status.retry_count = 0
            return

        self.metrics.attempts += 1
        try:
            response = self.transport.send(self._payload)
        except TransportError as e:
            self.status.exception_status(e)
        except Exception as e:
            logger.exception(f"Unexpected error from transport: {e}")
            self.status.exception_status(e)
        else:
            self.status.response_status(response)

        if not self.status.last_send_successful:
            self.metrics.failures += 1

        self._finish_batch(self.status.continuation_status(self._batch_size))

    def _finish_batch(self, outcome: SendOutcome) -> None:
        if outcome is SendOutcome.RETRY or self._payload is None:
            return

        if outcome is SendOutcome.DELIVERED:
            self.metrics.batches_sent += 1
            self.metrics.transactions_sent += self._batch_size
        else:
            self.metrics.batches_discarded += 1
            self.metrics.transactions_discarded += self._batch_size

        self._payload = None
        self._batch_size = 0

    def get_stats(self) -> dict:
        return {
            "name": self.name,
            "alive": self.is_alive,
            "retry_pending": self.status.retry_last_send,
            "retry_count": self.status.retry_count,
            "last_response_status": self.status.last_response_status,
            "attempts": self.metrics.attempts,
            "failures": self.metrics.failures,
            "batches_sent": self.metrics.batches_sent,
            "transactions_sent": self.metrics.transactions_sent,
            "batches_discarded": self.metrics.batches_discarded,
            "transactions_discarded": self.metrics.transactions_discarded,
        }
