"""
The agent applications log their transactions through.
"""

import logging
import threading
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .buffer import TransactionBuffer
from .config import AgentConfig, load_agent_config
from .constants import MAX_SENDER_WORKERS, OVERLOAD_CHECK_INTERVAL
from .errors import InvalidAgentConfigError
from .logs_helpers import log_call
from .models import Transaction, WireRecord
from .overload import OverloadMonitor
from .sender import Sender
from .transport import HttpTransport, Transport
from .validators import TransactionValidator, default_validators

logger = logging.getLogger(__name__)


class Agent:
    """
    Validates, buffers and asynchronously ships transactions.

    Usage::

        agent = Agent(config)
        agent.start()

        transaction = agent.new_transaction()
        transaction.from_key = "app01"
        transaction.to_key = "app02"
        transaction.status = "success"
        agent.add_transaction(transaction)

        agent.stop()
    """

    def __init__(
        self,
        config: AgentConfig,
        transport: Optional[Transport] = None,
        validators: Optional[Sequence[TransactionValidator]] = None,
        initial_workers: int = 1,
        max_workers: int = MAX_SENDER_WORKERS,
        overload_check_interval: float = OVERLOAD_CHECK_INTERVAL,
        edge_triggered_overload: bool = False,
    ):
        """
        Args:
            config: The configuration snapshot of this agent.
            transport: Delivers request bodies. Defaults to an HTTP transport
                built from ``config``.
            validators: The validator chain. Defaults to the operation, id type
                and application validators.
            initial_workers: Sender workers started by :meth:`start`.
            max_workers: Hard cap of sender workers.
            overload_check_interval: Seconds between overload checks.
            edge_triggered_overload: Request one worker per overload crossing
                instead of one per check.

        Raises:
            InvalidAgentConfigError: If the configuration is invalid.
        """
        config.validate()
        if initial_workers < 1 or max_workers < initial_workers:
            raise InvalidAgentConfigError(
                reason="Worker counts must satisfy 1 <= initial_workers <= max_workers."
            )

        self.config = config
        self.initial_workers = initial_workers
        self.max_workers = max_workers

        self.buffer = TransactionBuffer(config.size_threshold)
        self.validators: List[TransactionValidator] = (
            list(validators) if validators is not None else default_validators(config)
        )

        self._transport = transport
        self._owns_transport = transport is None

        self._senders: List[Sender] = []
        self._lock = threading.Lock()
        self._running = False

        self.monitor = OverloadMonitor(
            buffer=self.buffer,
            size_threshold=config.size_threshold,
            on_overload=self.increase_workers,
            interval=overload_check_interval,
            edge_triggered=edge_triggered_overload,
        )

        logger.info("Flowlog agent initialized.")

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = HttpTransport.from_config(self.config)
        return self._transport

    @property
    def worker_count(self) -> int:
        with self._lock:
            return len(self._senders)

    @property
    def running(self) -> bool:
        return self._running

    def is_enabled(self) -> bool:
        return self.config.enabled

    @log_call(show_args=False)
    def start(self) -> None:
        """
        Start the sender workers and the overload monitor.

        Does nothing when the agent is disabled or already running.
        """
        if not self.is_enabled():
            logger.info("Flowlog agent is disabled, not starting sender workers.")
            return

        with self._lock:
            if self._running:
                return
            self._running = True
            for _ in range(self.initial_workers):
                self._spawn_sender()

        self.monitor.start()
        logger.info("Flowlog agent started with %s sender worker(s).", self.initial_workers)

    @log_call(show_args=False)
    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the agent, blocking until buffered transactions have been flushed.

        Args:
            timeout: Seconds to wait for each sender worker, ``None`` waits
                until it has finished.
        """
        self.monitor.cancel()

        with self._lock:
            self._running = False
            senders = list(self._senders)

        for sender in senders:
            sender.stop()

        for sender in senders:
            if not sender.join(timeout):
                logger.warning("Sender %s did not stop within %s seconds", sender.name, timeout)

        with self._lock:
            self._senders.clear()

        if self._owns_transport and self._transport is not None:
            self._transport.close()
            self._transport = None

        logger.info("Flowlog agent stopped.")

    def __enter__(self) -> "Agent":
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    def _spawn_sender(self) -> Sender:
        sender = Sender(self.config, self.buffer, self.transport)
        self._senders.append(sender)
        sender.start()
        return sender

    def increase_workers(self) -> bool:
        """
        Add a sender worker unless the cap has been reached.

        Returns:
            bool: True if a worker was added.
        """
        logger.info("Additional sender worker requested.")
        with self._lock:
            if not self._running or len(self._senders) >= self.max_workers:
                return False
            sender = self._spawn_sender()

        logger.info("Added sender worker %s.", sender.name)
        return True

    def new_transaction(self) -> Transaction:
        """
        Create a transaction bound to this agent's configuration.
        """
        return Transaction(self.config)

    def add_transaction(self, transaction: Transaction) -> None:
        """
        Validate a transaction and queue it for sending.

        Does nothing when the agent is disabled.

        Raises:
            TransactionValidationError: If the transaction is not valid. It is
                not queued.
            WireConversionError: If the transaction cannot be converted.
        """
        if not self.is_enabled():
            return

        self._validate_transaction(transaction)
        self.buffer.push(WireRecord.from_transaction(transaction))
        logger.debug("Added transaction %r.", transaction)

    def _validate_transaction(self, transaction: Transaction) -> None:
        for validator in self.validators:
            validator.validate(transaction)

    def application_exists(self, key: str) -> bool:
        return self.config.applications.entry_exists(key)

    def operation_exists(self, key: str) -> bool:
        return self.config.operations.entry_exists(key)

    def payload_type_exists(self, key: str) -> bool:
        return self.config.payload_types.entry_exists(key)

    def id_type_exists(self, key: str) -> bool:
        return self.config.id_types.entry_exists(key)

    def get_stats(self) -> dict:
        with self._lock:
            senders = list(self._senders)

        return {
            "enabled": self.is_enabled(),
            "running": self._running,
            "workers": len(senders),
            "max_workers": self.max_workers,
            "buffer": self.buffer.get_stats(),
            "overload": self.monitor.get_stats(),
            "senders": [sender.get_stats() for sender in senders],
        }


class AgentFactory:
    """
    Builds an :class:`Agent` from a configuration object or an INI file.
    """

    def __init__(self):
        self._config: Optional[AgentConfig] = None
        self._config_path: Optional[Path] = None
        self._transport: Optional[Transport] = None
        self._agent_kwargs: dict = {}

    def set_config(self, config: AgentConfig) -> "AgentFactory":
        self._config = config
        return self

    def set_config_path(self, config_path: Union[str, Path]) -> "AgentFactory":
        self._config_path = Path(config_path)
        return self

    def set_transport(self, transport: Transport) -> "AgentFactory":
        self._transport = transport
        return self

    def set_options(self, **agent_kwargs) -> "AgentFactory":
        self._agent_kwargs.update(agent_kwargs)
        return self

    def build(self, start: bool = True) -> Agent:
        """
        Build the agent, started unless ``start`` is False.

        Raises:
            InvalidAgentConfigError: If no configuration source was given or the
                configuration is invalid.
        """
        if self._config is not None:
            config = self._config
        elif self._config_path is not None:
            config = load_agent_config(self._config_path)
        else:
            raise InvalidAgentConfigError(reason="No configuration specified!")

        agent = Agent(config, transport=self._transport, **self._agent_kwargs)
        if start:
            agent.start()
        return agent
