from unittest.mock import Mock

import pytest

from flowlog.buffer import TransactionBuffer
from flowlog.models import WireRecord
from flowlog.overload import OverloadMonitor


def fill(buffer: TransactionBuffer, count: int) -> None:
    for i in range(count):
        buffer.push(WireRecord(timestamp=i))


@pytest.fixture
def buffer() -> TransactionBuffer:
    return TransactionBuffer(10)


class TestOverloadMonitor:
    """
    Tests for detecting a backlog and requesting more sender workers.
    """

    def test_limit(self, buffer) -> None:
        monitor = OverloadMonitor(buffer, 10, Mock())
        assert monitor.limit == pytest.approx(13.0)

    def test_empty_buffer_is_ignored(self, buffer) -> None:
        on_overload = Mock()
        monitor = OverloadMonitor(buffer, 10, on_overload)

        assert monitor.check() is False
        on_overload.assert_not_called()

    @pytest.mark.parametrize("size, expected", [(10, False), (13, False), (14, True)])
    def test_requests_worker_above_limit(self, buffer, size, expected) -> None:
        on_overload = Mock()
        monitor = OverloadMonitor(buffer, 10, on_overload)
        fill(buffer, size)

        assert monitor.check() is expected
        assert on_overload.call_count == int(expected)

    def test_level_triggered_requests_on_every_check(self, buffer) -> None:
        on_overload = Mock()
        monitor = OverloadMonitor(buffer, 10, on_overload)
        fill(buffer, 20)

        for _ in range(3):
            monitor.check()

        assert on_overload.call_count == 3

    def test_edge_triggered_requests_once_per_crossing(self, buffer) -> None:
        on_overload = Mock()
        monitor = OverloadMonitor(buffer, 10, on_overload, edge_triggered=True)
        fill(buffer, 20)

        assert monitor.check() is True
        assert monitor.check() is False

        buffer.drain()
        assert monitor.check() is False

        fill(buffer, 14)
        assert monitor.check() is True
        assert on_overload.call_count == 2

    def test_zero_threshold_overloads_with_any_data(self) -> None:
        buffer = TransactionBuffer(0)
        on_overload = Mock()
        monitor = OverloadMonitor(buffer, 0, on_overload)
        fill(buffer, 1)

        assert monitor.check() is True

    def test_periodic_checks(self, buffer) -> None:
        on_overload = Mock()
        monitor = OverloadMonitor(buffer, 10, on_overload, interval=0.01)
        fill(buffer, 20)

        monitor.start()
        try:
            for _ in range(500):
                if on_overload.call_count:
                    break
                monitor._cancelled.wait(0.01)
        finally:
            monitor.cancel()

        assert on_overload.call_count >= 1
        assert monitor._thread is None

    def test_failing_callback_keeps_monitor_running(self, buffer) -> None:
        on_overload = Mock(side_effect=[RuntimeError("boom"), None, None, None])
        monitor = OverloadMonitor(buffer, 10, on_overload, interval=0.01)
        fill(buffer, 20)

        monitor.start()
        try:
            for _ in range(500):
                if on_overload.call_count >= 2:
                    break
                monitor._cancelled.wait(0.01)
        finally:
            monitor.cancel()

        assert on_overload.call_count >= 2

    def test_stats(self, buffer) -> None:
        monitor = OverloadMonitor(buffer, 10, Mock())
        fill(buffer, 20)
        monitor.check()

        stats = monitor.get_stats()

        assert stats["checks"] == 1
        assert stats["requests"] == 1
        assert stats["overloaded"] is True
