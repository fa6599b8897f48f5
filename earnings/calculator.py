"""
Purpose: Per-delivery partner earnings (the "what did this drop pay" layer).
What it does:

Computes for one delivered order:

subtotal = Σ(unit_price * quantity)   (goods value only, never a fee-inclusive total)

base = 25 if subtotal >= 199 (free delivery, platform pays) else 30

time bonuses from the delivery moment:
  peak hour  7-10 AM / 6-9 PM local time
  weekend    Saturday / Sunday
  bad weather only on explicit caller override

total = base + Σ bonuses  (2 dp, half-up)

Also reports who funded the payout (customer vs platform) and the platform's
signed net on the order.

Rule: Deterministic given its inputs. Never reads the wall clock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple, Union

from orders.models import InvalidTimestamp, OrderSnapshot, parse_timestamp
from pricing.money import ZERO, quantize, to_money, to_quantity
from pricing.policy import PolicyConfig, resolve_policy
from .models import BonusKind, DeliveryEarningsResult, DeliveryType

logger = logging.getLogger(__name__)

TimestampLike = Union[datetime, str]

BONUS_LABELS = {
    BonusKind.PEAK_HOUR: "Peak Hour",
    BonusKind.WEEKEND: "Weekend",
    BonusKind.BAD_WEATHER: "Bad Weather",
    BonusKind.DAILY_TARGET: "Daily Target",
    BonusKind.WEEKLY_TARGET: "Weekly Target",
    BonusKind.MONTHLY_TARGET: "Monthly Target",
    BonusKind.RATING: "Rating",
}


def order_subtotal(order: OrderSnapshot) -> Tuple[Decimal, bool]:
    """
    Item subtotal and whether the empty/malformed-cart fallback fired.

    An empty cart, or any line missing its price or quantity, drops the whole
    subtotal to 0, which lands the order in the paid-delivery tier.
    Negative or non-numeric values still raise InvalidAmount.
    """
    if not order.items:
        logger.warning("Order %s has no items; subtotal falls back to 0 (paid tier)", order.id)
        return ZERO, True

    subtotal = ZERO
    for item in order.items:
        if item.is_malformed:
            logger.warning(
                "Order %s has an item without price/quantity (%r); subtotal falls back to 0 (paid tier)",
                order.id,
                item,
            )
            return ZERO, True
        subtotal += to_money(item.unit_price, "unit_price") * to_quantity(item.quantity)

    return subtotal, False


def is_peak_hour(moment: datetime, policy: Optional[PolicyConfig] = None) -> bool:
    policy = resolve_policy(policy)
    return any(start <= moment.hour < end for start, end in policy.peak_hour_windows)


def is_weekend(moment: datetime, policy: Optional[PolicyConfig] = None) -> bool:
    policy = resolve_policy(policy)
    return moment.weekday() in policy.weekend_days


def time_bonuses(
    moment: datetime,
    *,
    bad_weather: bool = False,
    policy: Optional[PolicyConfig] = None,
) -> Dict[BonusKind, Decimal]:
    """
    Per-delivery bonuses in force at `moment` (its own wall-clock hour and weekday).
    """
    policy = resolve_policy(policy)
    bonuses: Dict[BonusKind, Decimal] = {}

    if is_peak_hour(moment, policy):
        bonuses[BonusKind.PEAK_HOUR] = policy.bonuses.peak_hour

    if is_weekend(moment, policy):
        bonuses[BonusKind.WEEKEND] = policy.bonuses.weekend

    if bad_weather:
        bonuses[BonusKind.BAD_WEATHER] = policy.bonuses.bad_weather

    return bonuses


def effective_delivery_time(
    order: OrderSnapshot,
    delivery_time: Optional[TimestampLike] = None,
    now: Optional[TimestampLike] = None,
) -> datetime:
    """
    delivery_time -> order.delivered_at -> order.order_time -> now.
    """
    for candidate, name in (
        (delivery_time, "delivery_time"),
        (order.delivered_at, "delivered_at"),
        (order.order_time, "order_time"),
        (now, "now"),
    ):
        if candidate is not None:
            return parse_timestamp(candidate, name)

    raise InvalidTimestamp(f"Order {order.id} has no delivery time and no `now` was supplied")


def compute_delivery_earnings(
    order: OrderSnapshot,
    delivery_time: Optional[TimestampLike] = None,
    *,
    now: Optional[TimestampLike] = None,
    bad_weather: bool = False,
    policy: Optional[PolicyConfig] = None,
) -> DeliveryEarningsResult:
    """
    Earnings breakdown for a single delivery.
    """
    policy = resolve_policy(policy)

    subtotal, fallback = order_subtotal(order)
    is_free_delivery = subtotal >= policy.free_delivery_threshold

    base_earnings = policy.partner_earnings_free if is_free_delivery else policy.partner_earnings_paid

    moment = effective_delivery_time(order, delivery_time, now)
    bonuses = time_bonuses(moment, bad_weather=bad_weather, policy=policy)
    total_bonuses = sum(bonuses.values(), ZERO)

    if is_free_delivery:
        customer_paid = ZERO
        platform_paid = policy.partner_earnings_free
        platform_net_revenue = -policy.partner_earnings_free
    else:
        customer_paid = policy.delivery_fee
        platform_paid = ZERO
        platform_net_revenue = policy.delivery_fee - policy.partner_earnings_paid

    return DeliveryEarningsResult(
        order_id=order.id,
        order_amount=quantize(subtotal),
        delivery_type=DeliveryType.FREE_DELIVERY if is_free_delivery else DeliveryType.PAID_DELIVERY,
        base_earnings=quantize(base_earnings),
        bonuses={kind: quantize(amount) for kind, amount in bonuses.items()},
        total_bonuses=quantize(total_bonuses),
        total_earnings=quantize(base_earnings + total_bonuses),
        customer_paid=quantize(customer_paid),
        platform_paid=quantize(platform_paid),
        platform_net_revenue=quantize(platform_net_revenue),
        delivery_time=moment,
        subtotal_fallback=fallback,
    )


def current_bonus_status(now: TimestampLike, policy: Optional[PolicyConfig] = None) -> Dict[str, object]:
    """
    Which per-delivery bonuses a partner would earn right now (dashboard banner).
    """
    policy = resolve_policy(policy)
    moment = parse_timestamp(now, "now")
    peak = is_peak_hour(moment, policy)
    weekend = is_weekend(moment, policy)
    return {
        "is_peak_hour": peak,
        "is_weekend": weekend,
        "peak_hour_bonus": policy.bonuses.peak_hour if peak else ZERO,
        "weekend_bonus": policy.bonuses.weekend if weekend else ZERO,
    }


def format_bonus_breakdown(bonuses: Dict[BonusKind, Decimal], policy: Optional[PolicyConfig] = None) -> str:
    """
    "Peak Hour: +₹5, Weekend: +₹3", or "No bonuses".
    """
    policy = resolve_policy(policy)
    parts = [
        f"{BONUS_LABELS[kind]}: +{policy.currency_symbol}{amount.normalize():f}"
        for kind, amount in bonuses.items()
        if amount
    ]
    return ", ".join(parts) or "No bonuses"
