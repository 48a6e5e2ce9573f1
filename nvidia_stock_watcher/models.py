"""Domain models used by the application."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

StatusMap = Dict[str, str]

UNKNOWN_TITLE = "Unknown GPU"
UNKNOWN_SKU = "Unknown SKU"
UNKNOWN_PRICE = "Unknown Price"

BUY_NOW = "buy_now"

MARKDOWN_SPECIAL = ("_", "*", "`", "[")


class ItemStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @classmethod
    def from_code(cls, code: Any) -> "ItemStatus":
        """Map the upstream ``prdStatus`` code; only ``buy_now`` means in stock."""
        return cls.AVAILABLE if code == BUY_NOW else cls.UNAVAILABLE


def escape_markdown(text: str) -> str:
    """Escape the characters Telegram's legacy Markdown treats as entity markers."""
    for char in MARKDOWN_SPECIAL:
        text = text.replace(char, "\\" + char)
    return text


def _field(record: Mapping[str, Any], key: str, default: str) -> str:
    value = record.get(key)
    if value is None or value == "":
        return default
    return str(value)


@dataclass(frozen=True)
class Item:
    id: str
    title: str
    price: str
    status: ItemStatus
    link: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Item":
        return cls(
            id=_field(record, "productSKU", UNKNOWN_SKU),
            title=_field(record, "productTitle", UNKNOWN_TITLE),
            price=_field(record, "productPrice", UNKNOWN_PRICE),
            status=ItemStatus.from_code(record.get("prdStatus")),
            link=_field(record, "internalLink", ""),
        )

    @property
    def available(self) -> bool:
        return self.status is ItemStatus.AVAILABLE

    def to_telegram_string(self) -> str:
        status = "🟢 AVAILABLE" if self.available else "🔴 OUT OF STOCK"
        return (
            "Product:\n\n"
            f"🎮 *Title*: {escape_markdown(self.title)}\n"
            f"🏷️ *SKU*: {escape_markdown(self.id)}\n"
            f"💰 *Price*: {escape_markdown(self.price)}\n"
            f"📦 *Status*: {status}\n\n"
            f"🔗 *Link*: {escape_markdown(self.link)}"
        )


def format_message(item: Item) -> str:
    return item.to_telegram_string()


@dataclass
class CycleResult:
    """Outcome of one polling cycle."""

    fetched: bool = False
    items: int = 0
    changed: int = 0
    sent: int = 0
    saved: bool = False
