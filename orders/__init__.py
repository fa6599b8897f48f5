"""
Purpose: Package entry + stable exports.

Orders domain package.

Public API:
- Domain models: OrderSnapshot, OrderItem, OrderStatus
- Timestamp parsing: parse_timestamp, InvalidTimestamp
- Cancellation window: can_cancel, seconds_remaining, cancellation_eligibility,
  cancel_order, restore_items_to_cart
"""
from .models import InvalidTimestamp, OrderItem, OrderSnapshot, OrderStatus, parse_timestamp
from .cancellation import (
    CancellationEligibility,
    OrderCancellationError,
    can_cancel,
    cancel_order,
    cancellation_eligibility,
    restore_items_to_cart,
    seconds_remaining,
)

__all__ = ["OrderSnapshot",
           "OrderItem",
           "OrderStatus",
           "InvalidTimestamp",
           "parse_timestamp",
           "CancellationEligibility",
           "OrderCancellationError",
           "can_cancel",
           "seconds_remaining",
           "cancellation_eligibility",
           "cancel_order",
           "restore_items_to_cart",
           ]
