"""
Purpose: End-of-shift earnings projection from partial-day numbers.
What it does:
Extrapolates the current hourly rate onto a fixed 8-hour reference shift
and flags whether the daily delivery target will be reached. The projected
total includes the daily-target bonus when the target is projected to be met,
so it lines up with what aggregate_daily would report at end of day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from orders.models import parse_timestamp
from pricing.money import AmountLike, ZERO, quantize, round_half_up, to_money, to_quantity
from pricing.policy import PolicyConfig, resolve_policy


@dataclass(frozen=True)
class ShiftProjection:
    current_deliveries: int
    current_earnings: Decimal
    hours_worked: Decimal
    deliveries_per_hour: Decimal
    earnings_per_hour: Decimal
    projected_deliveries: int
    projected_base_earnings: Decimal
    projected_earnings: Decimal
    will_meet_daily_target: bool
    deliveries_needed_for_target: int


def project_shift_earnings(
    deliveries_so_far: int,
    earnings_so_far: AmountLike,
    hours_worked: Union[AmountLike, float],
    policy: Optional[PolicyConfig] = None,
) -> ShiftProjection:
    """
    Project today's deliveries and earnings onto the reference shift.

    hours_worked comes from the caller (see hours_worked_since_shift_start);
    this function reads no clock.
    """
    policy = resolve_policy(policy)

    deliveries = to_quantity(deliveries_so_far, "deliveries_so_far")
    earnings = to_money(earnings_so_far, "earnings_so_far")
    hours = to_money(hours_worked, "hours_worked")

    if hours > 0:
        deliveries_per_hour = Decimal(deliveries) / hours
        earnings_per_hour = earnings / hours
    else:
        deliveries_per_hour = ZERO
        earnings_per_hour = ZERO

    shift_hours = policy.reference_shift_hours
    projected_deliveries = round_half_up(deliveries_per_hour * shift_hours)
    projected_base = earnings_per_hour * shift_hours

    will_meet_daily_target = projected_deliveries >= policy.daily_target_deliveries
    projected_total = projected_base + (policy.bonuses.daily_target if will_meet_daily_target else ZERO)

    return ShiftProjection(
        current_deliveries=deliveries,
        current_earnings=quantize(earnings),
        hours_worked=hours,
        deliveries_per_hour=deliveries_per_hour.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        earnings_per_hour=quantize(earnings_per_hour),
        projected_deliveries=projected_deliveries,
        projected_base_earnings=quantize(projected_base),
        projected_earnings=quantize(projected_total),
        will_meet_daily_target=will_meet_daily_target,
        deliveries_needed_for_target=max(0, policy.daily_target_deliveries - deliveries),
    )


def hours_worked_since_shift_start(now: Union[datetime, str], policy: Optional[PolicyConfig] = None) -> Decimal:
    """
    Hours since the nominal shift start (9 AM by default) on `now`'s day; 0 before it.
    """
    policy = resolve_policy(policy)
    now = parse_timestamp(now, "now")

    if now.hour < policy.shift_start_hour:
        return ZERO

    return Decimal(now.hour - policy.shift_start_hour) + Decimal(now.minute) / 60
