"""
Periodic check for a backlog the current sender workers cannot keep up with.

When the log service is slow and transactions keep coming, the buffer grows,
batches get bigger and requests get slower. Adding sender workers raises the
aggregate throughput. Workers are never removed automatically.
"""

import logging
import threading
from typing import TYPE_CHECKING, Callable, Optional

from .constants import OVERLOAD_CHECK_INTERVAL, OVERLOAD_FACTOR

if TYPE_CHECKING:
    from .buffer import TransactionBuffer

logger = logging.getLogger(__name__)


class OverloadMonitor:
    """
    Requests one more sender worker whenever the buffer is well above the
    size threshold.

    Level triggered by default: every check that finds the buffer overloaded
    requests a worker. With ``edge_triggered`` a single request is made per
    crossing, and the monitor re-arms once the buffer is back at or below the
    limit. Capping the worker count is up to ``on_overload``.
    """

    def __init__(
        self,
        buffer: "TransactionBuffer",
        size_threshold: int,
        on_overload: Callable[[], None],
        interval: float = OVERLOAD_CHECK_INTERVAL,
        edge_triggered: bool = False,
        factor: float = OVERLOAD_FACTOR,
    ):
        self.buffer = buffer
        self.size_threshold = size_threshold
        self.on_overload = on_overload
        self.interval = interval
        self.edge_triggered = edge_triggered
        self.factor = factor

        self._overloaded = False
        self._checks = 0
        self._requests = 0

        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def limit(self) -> float:
        return self.size_threshold * self.factor

    def check(self) -> bool:
        """
        Inspect the buffer once.

        Returns:
            bool: True if an additional worker was requested.
        """
        self._checks += 1

        if self.buffer.is_empty():
            self._overloaded = False
            return False

        size = self.buffer.size()
        if size <= self.limit:
            self._overloaded = False
            return False

        if self.edge_triggered and self._overloaded:
            return False

        self._overloaded = True
        self._requests += 1
        logger.info(
            "Transaction buffer overloaded (size=%s, limit=%.1f), requesting a sender worker",
            size,
            self.limit,
        )
        self.on_overload()
        return True

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return

        self._cancelled.clear()
        self._thread = threading.Thread(
            target=self._run, name="flowlog-overload-monitor", daemon=True
        )
        self._thread.start()

    def cancel(self, timeout: Optional[float] = None) -> None:
        self._cancelled.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._cancelled.wait(self.interval):
            try:
                self.check()
            except Exception as e:
                logger.exception(f"Overload check failed: {e}")

    def get_stats(self) -> dict:
        return {
            "checks": self._checks,
            "requests": self._requests,
            "overloaded": self._overloaded,
            "edge_triggered": self.edge_triggered,
            "limit": self.limit,
        }
