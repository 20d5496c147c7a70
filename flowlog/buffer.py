"""
Thread-safe buffer of wire records waiting to be sent.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

from .models import WireRecord

logger = logging.getLogger(__name__)

SizeObserver = Callable[[int], None]


@dataclass
class BufferMetrics:
    """
    Metrics for the transaction buffer.
    """

    pushed: int = 0
    drained: int = 0
    notifications: int = 0
    notifications_skipped: int = 0
    high_water_mark: int = 0


class TransactionBuffer:
    """
    Unbounded, insertion ordered queue of :class:`WireRecord`.

    Any number of producers may push and any number of senders may drain
    concurrently. Size observers are told about the new size after a push,
    on a best-effort basis: when another push is already notifying, the
    notification is skipped. Observers must not rely on it alone and poll.
    """

    def __init__(self, size_threshold: int = 0):
        """
        Args:
            size_threshold: When 0 or 1 every drain returns a single record.
        """
        self.size_threshold = size_threshold

        self._records: Deque[WireRecord] = deque()
        self._observers: List[SizeObserver] = []
        self._notify_lock = threading.Lock()

        self.metrics = BufferMetrics()

    def add_size_observer(self, observer: SizeObserver) -> None:
        self._observers.append(observer)

    def remove_size_observer(self, observer: SizeObserver) -> None:
        try:
            self._observers.remove(observer)
        except ValueError:
            pass

    def push(self, record: WireRecord) -> None:
        """
        Append a record and notify size observers if nobody else is doing it.
        """
        self._records.append(record)
        self.metrics.pushed += 1

        if not self._notify_lock.acquire(blocking=False):
            self.metrics.notifications_skipped += 1
            return

        try:
            current_size = len(self._records)
            self.metrics.high_water_mark = max(
                current_size, self.metrics.high_water_mark
            )
            self.metrics.notifications += 1

            for observer in list(self._observers):
                try:
                    observer(current_size)
                except Exception:
                    logger.exception("Buffer size observer failed")
        finally:
            self._notify_lock.release()

    def max_drain_count(self) -> Optional[int]:
        """
        Records per drain: exactly one when batching is off, otherwise unbounded.
        """
        return 1 if self.size_threshold <= 1 else None

    def drain(self, max_count: Optional[int] = None) -> List[WireRecord]:
        """
        Remove and return up to ``max_count`` of the oldest records.

        Args:
            max_count: Upper bound of records to take. ``None`` takes everything
                currently buffered. The per-drain policy of
                :meth:`max_drain_count` always applies on top.
        """
        policy = self.max_drain_count()
        if policy is not None:
            max_count = policy if max_count is None else min(max_count, policy)

        # Records pushed while draining wait for the next drain
        limit = len(self._records)
        if max_count is not None:
            limit = min(limit, max_count)

        batch: List[WireRecord] = []
        for _ in range(limit):
            try:
                batch.append(self._records.popleft())
            except IndexError:
                # Another sender took the rest
                break

        self.metrics.drained += len(batch)
        return batch

    def is_empty(self) -> bool:
        return not self._records

    def contains_data(self) -> bool:
        return not self.is_empty()

    def size(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get_stats(self) -> dict:
        return {
            "size": len(self._records),
            "size_threshold": self.size_threshold,
            "pushed": self.metrics.pushed,
            "drained": self.metrics.drained,
            "notifications": self.metrics.notifications,
            "notifications_skipped": self.metrics.notifications_skipped,
            "high_water_mark": self.metrics.high_water_mark,
        }
