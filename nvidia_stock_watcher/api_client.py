"""HTTP client for the NVIDIA marketplace product search API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from .config import HEADERS, Config
from .models import Item

logger = logging.getLogger(__name__)


def extract_records(snapshot: Any) -> List[Dict[str, Any]]:
    """Return the raw product records of a search response, in order.

    A response without ``searchedProducts.productDetails`` is treated as an
    empty listing.
    """
    if not isinstance(snapshot, dict):
        return []
    searched = snapshot.get("searchedProducts")
    if not isinstance(searched, dict):
        return []
    details = searched.get("productDetails")
    if not isinstance(details, list):
        return []
    return [record for record in details if isinstance(record, dict)]


class NvidiaAPIClient:
    """Fetch product listing snapshots from the marketplace."""

    def __init__(self, config: Config, session: Optional[requests.Session] = None) -> None:
        self.url = config.catalog_url
        self.params = config.catalog_params
        self.timeout = config.request_timeout
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def fetch(self) -> Optional[Dict[str, Any]]:
        logger.info("Fetching NVIDIA API...")
        try:
            response = self.session.get(self.url, params=self.params, timeout=self.timeout)
            response.raise_for_status()
            data: Dict[str, Any] = response.json()
        except requests.RequestException as exc:
            logger.error("Error fetching product data: %s", exc)
            return None
        except ValueError as exc:
            logger.error("Product data is not valid JSON: %s", exc)
            return None
        logger.info("Product data fetched successfully.")
        return data

    def get_items(self) -> Optional[List[Item]]:
        snapshot = self.fetch()
        if snapshot is None:
            return None
        return [Item.from_record(record) for record in extract_records(snapshot)]

    def close(self) -> None:
        self.session.close()
