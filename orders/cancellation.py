"""
Purpose: Customer cancellation window (PLACED -> CANCELLED).
What it does:
Decides whether a placed order can still be cancelled, how long the window
stays open, and restores a cancelled order's items to the customer's cart.

Rule: Pure decisions over caller-supplied time. Persisting the status change
and sequencing it with the cart restoration is the caller's transaction.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from pricing.policy import PolicyConfig, resolve_policy
from .models import InvalidTimestamp, OrderItem, OrderSnapshot, OrderStatus

logger = logging.getLogger(__name__)


class OrderCancellationError(Exception):
    """Raised when a cancellation is attempted outside the window or from a non-PLACED status."""
    pass


@dataclass(frozen=True)
class CancellationEligibility:
    eligible: bool
    seconds_remaining: int


def _elapsed_seconds(order: OrderSnapshot, now: datetime) -> float:
    if order.order_time is None:
        raise InvalidTimestamp(f"Order {order.id} has no order_time")
    try:
        return (now - order.order_time).total_seconds()
    except TypeError:
        # naive vs timezone-aware datetimes
        raise InvalidTimestamp(
            f"Cannot compare now={now!r} with order_time={order.order_time!r}"
        ) from None


def can_cancel(order: OrderSnapshot, now: datetime, policy: Optional[PolicyConfig] = None) -> bool:
    """
    True iff the order is still PLACED and was placed no more than
    cancellation_window_seconds ago.
    """
    policy = resolve_policy(policy)
    if order.status != OrderStatus.PLACED:
        return False
    return _elapsed_seconds(order, now) <= policy.cancellation_window_seconds


def seconds_remaining(order: OrderSnapshot, now: datetime, policy: Optional[PolicyConfig] = None) -> int:
    """
    Whole seconds left in the window, regardless of status.
    An order_time in the future (clock skew) reports the full window.
    """
    policy = resolve_policy(policy)
    window = policy.cancellation_window_seconds
    remaining = window - _elapsed_seconds(order, now)
    return min(window, max(0, math.floor(remaining)))


def cancellation_eligibility(
    order: OrderSnapshot, now: datetime, policy: Optional[PolicyConfig] = None
) -> CancellationEligibility:
    return CancellationEligibility(
        eligible=can_cancel(order, now, policy),
        seconds_remaining=seconds_remaining(order, now, policy),
    )


def cancel_order(order: OrderSnapshot, now: datetime, policy: Optional[PolicyConfig] = None) -> OrderSnapshot:
    """
    Called when the customer hits "Cancel".
    Returns the CANCELLED snapshot; the caller persists it (at most once per order).
    """
    if order.status != OrderStatus.PLACED:
        raise OrderCancellationError(f"Cannot cancel order {order.id} from {order.status.value}")

    if not can_cancel(order, now, policy):
        raise OrderCancellationError(f"Cancellation window for order {order.id} has closed")

    logger.info("Order %s cancelled within window", order.id)
    # OrderSnapshot is frozen, so return a new instance via replace
    return replace(order, status=OrderStatus.CANCELLED)


def restore_items_to_cart(order: OrderSnapshot, add_to_cart: Callable[[OrderItem], object]) -> List[OrderItem]:
    """
    Put every item of a cancelled order back into the customer's cart, one at a time.

    Best effort: an item that fails to restore is logged and returned in the
    failure list so the cancellation itself still stands.
    """
    failed: List[OrderItem] = []
    for item in order.items:
        try:
            add_to_cart(item)
        except Exception as e:
            logger.warning("Could not restore item %r of order %s to cart: %s", item, order.id, e)
            failed.append(item)
    return failed
