from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from nvidia_stock_watcher.config import Config
from nvidia_stock_watcher.dispatch import DispatchQueue, Pacer
from nvidia_stock_watcher.models import StatusMap


def make_record(sku: str, status: str = "buy_now", **extra: Any) -> Dict[str, Any]:
    record = {
        "productTitle": f"GeForce {sku}",
        "productSKU": sku,
        "productPrice": "€1,099.00",
        "prdStatus": status,
        "internalLink": f"https://marketplace.nvidia.com/fr-fr/{sku}",
    }
    record.update(extra)
    return record


def make_snapshot(*records: Dict[str, Any]) -> Dict[str, Any]:
    return {"searchedProducts": {"productDetails": list(records)}}


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeStopEvent:
    """Stands in for ``threading.Event``: waits advance a fake clock instantly."""

    def __init__(self, clock: Optional[FakeClock] = None, stop_after: Optional[int] = None) -> None:
        self.clock = clock or FakeClock()
        self.stop_after = stop_after
        self.waits: List[float] = []
        self._set = False

    def wait(self, timeout: float) -> bool:
        self.waits.append(timeout)
        self.clock.now += timeout
        if self.stop_after is not None and len(self.waits) >= self.stop_after:
            self._set = True
        return self._set

    def is_set(self) -> bool:
        return self._set

    def set(self) -> None:
        self._set = True


class RecordingNotifier:
    def __init__(self, fail_on: Optional[List[int]] = None) -> None:
        self.messages: List[str] = []
        self.fail_on = set(fail_on or [])

    def send(self, message: str) -> bool:
        self.messages.append(message)
        return len(self.messages) - 1 not in self.fail_on


class InMemoryStateStore:
    def __init__(self, initial: Optional[StatusMap] = None) -> None:
        self.data: StatusMap = dict(initial or {})
        self.saves: List[StatusMap] = []

    def load(self) -> StatusMap:
        return dict(self.data)

    def save(self, status_map: StatusMap) -> bool:
        self.saves.append(dict(status_map))
        self.data = dict(status_map)
        return True


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        telegram_bot_token="123:abc",
        telegram_chat_id="-100200300",
        state_file=str(tmp_path / "product_state.json"),
        last_fetch_file=str(tmp_path / ".last_fetch_timestamp"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stop_event(clock) -> FakeStopEvent:
    return FakeStopEvent(clock)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def dispatcher(notifier, stop_event, clock) -> DispatchQueue:
    return DispatchQueue(notifier, Pacer(2.0, stop_event, clock=clock))
