"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines the read-only order data the economics engine consumes:
- OrderItem (unit price, quantity)
- OrderSnapshot (id, items, status, order_time, delivered_at)

Defines enums/constants:
- OrderStatus = PLACED | PACKED | OUT_FOR_DELIVERY | DELIVERED | CANCELLED

Parses timestamps coming from the backend (datetime or ISO-8601 strings).

Rule: No pricing or earnings logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pricing.money import to_money, to_quantity


class InvalidTimestamp(ValueError):
    """Raised when a timestamp cannot be parsed or is missing where one is required."""
    pass


class OrderStatus(str, Enum):
    PLACED = "PLACED"
    PACKED = "PACKED"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class OrderItem:
    """
    One order line. None marks a field the backend did not send;
    such an item is treated as malformed by the earnings calculator.
    """
    unit_price: Optional[Decimal]
    quantity: Optional[int]

    @property
    def is_malformed(self) -> bool:
        return self.unit_price is None or self.quantity is None


@dataclass(frozen=True)
class OrderSnapshot:
    """
    A point-in-time copy of an order. The engine never mutates it.
    """
    id: Optional[str] = None
    items: Tuple[OrderItem, ...] = field(default_factory=tuple)
    status: OrderStatus = OrderStatus.PLACED
    order_time: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> OrderSnapshot:
        """
        Build a snapshot from a plain backend record (camelCase or snake_case keys).
        """
        items = tuple(_item_from_record(item) for item in (record.get("items") or []))

        status = record.get("status") or OrderStatus.PLACED
        if isinstance(status, str):
            status = OrderStatus(status.upper())

        order_id = record.get("id")
        return cls(
            id=str(order_id) if order_id is not None else None,
            items=items,
            status=status,
            order_time=parse_optional_timestamp(_first(record, "orderTime", "order_time"), "order_time"),
            delivered_at=parse_optional_timestamp(_first(record, "deliveredAt", "delivered_at"), "delivered_at"),
        )


def parse_timestamp(value: Any, field_name: str = "timestamp") -> datetime:
    """
    Accepts a datetime or an ISO-8601 string ("2024-06-01T08:00:00Z" included).
    """
    if isinstance(value, datetime):
        return value

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise InvalidTimestamp(f"{field_name} is not a valid ISO-8601 timestamp: {value!r}") from None

    raise InvalidTimestamp(f"{field_name} must be a datetime or ISO-8601 string, got {value!r}")


def parse_optional_timestamp(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_timestamp(value, field_name)


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _item_from_record(item: Mapping[str, Any]) -> OrderItem:
    price = _first(item, "price", "unitPrice", "unit_price")
    if price is None:
        product = item.get("product") or {}
        price = product.get("price")

    quantity = item.get("quantity")

    return OrderItem(
        unit_price=to_money(price, "unit_price") if price is not None else None,
        quantity=to_quantity(quantity) if quantity is not None else None,
    )
