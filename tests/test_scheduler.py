from unittest.mock import MagicMock

from nvidia_stock_watcher.models import CycleResult
from nvidia_stock_watcher.scheduler import Scheduler

from tests.conftest import FakeStopEvent


def _monitor():
    monitor = MagicMock()
    monitor.cycle.return_value = CycleResult(fetched=True)
    return monitor


def test_run_announces_once_then_cycles_until_stopped():
    monitor = _monitor()
    stop_event = FakeStopEvent(stop_after=3)

    assert Scheduler(monitor, 30, stop_event).run() == 3

    monitor.announce_all.assert_called_once_with()
    assert monitor.cycle.call_count == 3
    assert stop_event.waits == [30, 30, 30]


def test_run_without_announce():
    monitor = _monitor()
    Scheduler(monitor, 30, FakeStopEvent(stop_after=1)).run(announce=False)
    monitor.announce_all.assert_not_called()
    monitor.cycle.assert_called_once_with()


def test_run_does_nothing_when_already_stopped():
    monitor = _monitor()
    scheduler = Scheduler(monitor, 30, FakeStopEvent())
    scheduler.stop()
    assert scheduler.run() == 0
    monitor.announce_all.assert_not_called()
    monitor.cycle.assert_not_called()


def test_unexpected_cycle_error_does_not_stop_the_loop(caplog):
    monitor = _monitor()
    monitor.cycle.side_effect = [RuntimeError("boom"), CycleResult(fetched=True)]

    assert Scheduler(monitor, 5, FakeStopEvent(stop_after=2)).run(announce=False) == 2
    assert "Unexpected error during stock check" in caplog.text


def test_run_once_returns_cycle_result():
    monitor = _monitor()
    result = Scheduler(monitor, 30, FakeStopEvent()).run_once()
    assert result.fetched is True
    monitor.announce_all.assert_not_called()


def test_close_closes_monitor():
    monitor = _monitor()
    Scheduler(monitor, 30, FakeStopEvent()).close()
    monitor.close.assert_called_once_with()
