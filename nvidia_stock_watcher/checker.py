"""Stock status orchestration: fetch, diff, persist, notify."""

from __future__ import annotations

import logging
import time
from typing import Iterable, List, Optional

from .api_client import NvidiaAPIClient
from .dispatch import DispatchQueue
from .models import CycleResult, Item, StatusMap, format_message
from .state_manager import StateStore

logger = logging.getLogger(__name__)


def diff_items(items: Iterable[Item], status_map: StatusMap) -> List[Item]:
    """Return the items whose status differs from ``status_map``, in order.

    ``status_map`` is updated in place with the new statuses. Items never seen
    before always count as changed.
    """
    changed: List[Item] = []
    for item in items:
        logger.info("Product found: %s", item.title)
        if status_map.get(item.id) != item.status.value:
            logger.info("Status change detected for product %s. Sending notification.", item.title)
            changed.append(item)
            status_map[item.id] = item.status.value
        else:
            logger.info("No status change for product %s.", item.title)
    return changed


class StockMonitor:
    """Coordinate fetching, state tracking, and notifications."""

    def __init__(
        self,
        api_client: NvidiaAPIClient,
        state_store: StateStore,
        dispatcher: DispatchQueue,
        last_fetch_file: Optional[str] = None,
    ) -> None:
        self.api_client = api_client
        self.state_store = state_store
        self.dispatcher = dispatcher
        self.last_fetch_file = last_fetch_file

    def _fetch_items(self) -> Optional[List[Item]]:
        items = self.api_client.get_items()
        if items is not None:
            self._record_fetch_time()
        return items

    def _record_fetch_time(self) -> None:
        if not self.last_fetch_file:
            return
        try:
            with open(self.last_fetch_file, "w", encoding="utf-8") as f:
                f.write(str(time.time()))
        except OSError as exc:
            logger.warning("Could not write fetch timestamp to %s: %s", self.last_fetch_file, exc)

    def cycle(self) -> CycleResult:
        logger.info("Checking stock status for all products...")
        result = CycleResult()
        items = self._fetch_items()
        if items is None:
            logger.warning("No product data available.")
            return result
        result.fetched = True
        result.items = len(items)

        status_map = self.state_store.load()
        changed = diff_items(items, status_map)
        result.changed = len(changed)
        if not changed:
            logger.info("No change detected.")
        for item in changed:
            self.dispatcher.put(format_message(item))

        result.saved = self.state_store.save(status_map)
        result.sent = self.dispatcher.drain()
        return result

    def close(self) -> None:
        self.api_client.close()

    def announce_all(self) -> int:
        """Send the current status of every listed product, ignoring stored state."""
        logger.info("Sending initial status of all products to Telegram...")
        items = self._fetch_items()
        if items is None:
            logger.warning("No product data available for the initial status.")
            return 0
        for item in items:
            self.dispatcher.put(format_message(item))
        sent = self.dispatcher.drain()
        logger.info("Initial status sent for %s/%s products", sent, len(items))
        return sent
