"""Rate-limited, in-order delivery of queued notifications."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Optional

from .notifier import TelegramNotifier

logger = logging.getLogger(__name__)


class Pacer:
    """Leaky-bucket pacing: at most one send per ``interval`` seconds.

    Waits go through ``stop_event`` so a shutdown interrupts them.
    """

    def __init__(
        self,
        interval: float,
        stop_event: Optional[threading.Event] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self.stop_event = stop_event or threading.Event()
        self.clock = clock
        self._last: Optional[float] = None

    def wait(self) -> bool:
        """Block until the next send is allowed. False if stopped meanwhile."""
        if self._last is not None:
            remaining = self.interval - (self.clock() - self._last)
            if remaining > 0 and self.stop_event.wait(remaining):
                return False
        if self.stop_event.is_set():
            return False
        self._last = self.clock()
        return True


class DispatchQueue:
    """Ordered queue of formatted messages, drained through a notifier."""

    def __init__(self, notifier: TelegramNotifier, pacer: Pacer) -> None:
        self.notifier = notifier
        self.pacer = pacer
        self._pending: Deque[str] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def put(self, message: str) -> None:
        self._pending.append(message)

    def drain(self) -> int:
        """Send every pending message in insertion order; return how many succeeded."""
        sent = 0
        while self._pending:
            if not self.pacer.wait():
                logger.warning("Shutdown requested, dropping %s queued notifications", len(self._pending))
                self._pending.clear()
                break
            message = self._pending.popleft()
            if self.notifier.send(message):
                sent += 1
        return sent
