"""Fixed-interval polling loop."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .checker import StockMonitor
from .models import CycleResult

logger = logging.getLogger(__name__)


class Scheduler:
    """Run monitor cycles back to back, ``interval`` seconds apart, until stopped."""

    def __init__(
        self,
        monitor: StockMonitor,
        interval: float,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self.monitor = monitor
        self.interval = interval
        self.stop_event = stop_event or threading.Event()

    def stop(self) -> None:
        self.stop_event.set()

    def close(self) -> None:
        self.monitor.close()

    def run_once(self) -> CycleResult:
        result = self.monitor.cycle()
        logger.info(
            "Cycle finished - Products: %s, Changed: %s, Sent: %s",
            result.items,
            result.changed,
            result.sent,
        )
        return result

    def run(self, announce: bool = True) -> int:
        """Loop until the stop event is set; return the number of cycles run."""
        if announce and not self.stop_event.is_set():
            self.monitor.announce_all()

        cycles = 0
        while not self.stop_event.is_set():
            try:
                self.run_once()
            except Exception:  # noqa: BLE001 - keep polling whatever a cycle does.
                logger.exception("Unexpected error during stock check")
            cycles += 1
            logger.info("Waiting for %s seconds before the next check...", self.interval)
            if self.stop_event.wait(self.interval):
                break
        logger.info("Stock watcher stopped after %s cycles", cycles)
        return cycles
