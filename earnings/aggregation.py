"""
Purpose: Roll per-delivery earnings up into daily / weekly / monthly summaries.
What it does:

- Daily: runs every delivery through the calculator, sums totals, counts
  free/paid and peak-hour/weekend deliveries, then pays ONE flat daily-target
  bonus when the day's count reaches daily_target_deliveries.
- Weekly / Monthly: sum DailySummary totals and pay ONE flat weekly/monthly
  target bonus when the summed count crosses the threshold.
- Helpers to bucket raw deliveries by calendar day so weekly/monthly
  summaries can be built from order snapshots.

Notes:
- Weekly average_per_day divides by a literal 7.
- Monthly average_per_day divides by the day-of-month of `as_of`
  (days elapsed so far), not by the number of days in the month.

Rule: Aggregation only folds results; pricing rules live in calculator.py.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Union

from orders.models import InvalidTimestamp, OrderSnapshot
from pricing.money import ZERO, quantize
from pricing.policy import PolicyConfig, resolve_policy
from .calculator import TimestampLike, compute_delivery_earnings, effective_delivery_time
from .models import BonusKind, DailySummary, DeliveryType, MonthlySummary, WeeklySummary

logger = logging.getLogger(__name__)


def _average(total: Decimal, count: int) -> Decimal:
    if count <= 0:
        return quantize(ZERO)
    return quantize(total / count)


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def aggregate_daily(
    deliveries: Iterable[OrderSnapshot],
    *,
    day: Optional[date] = None,
    now: Optional[TimestampLike] = None,
    policy: Optional[PolicyConfig] = None,
) -> DailySummary:
    """
    Summarise one day's completed deliveries.

    `now` is only used as the bonus timestamp for deliveries that carry no
    time of their own. `day` labels the summary; when omitted it is the date
    of the earliest delivery.
    """
    policy = resolve_policy(policy)

    results = [compute_delivery_earnings(order, now=now, policy=policy) for order in deliveries]

    total_earnings = ZERO
    total_base_earnings = ZERO
    total_bonuses = ZERO
    free_deliveries = 0
    peak_hour_deliveries = 0
    weekend_deliveries = 0
    bonus_breakdown: Dict[BonusKind, Decimal] = {
        BonusKind.PEAK_HOUR: ZERO,
        BonusKind.WEEKEND: ZERO,
    }

    for result in results:
        total_earnings += result.total_earnings
        total_base_earnings += result.base_earnings
        total_bonuses += result.total_bonuses

        if result.delivery_type == DeliveryType.FREE_DELIVERY:
            free_deliveries += 1

        # a delivery can count in both buckets
        if BonusKind.PEAK_HOUR in result.bonuses:
            peak_hour_deliveries += 1
        if BonusKind.WEEKEND in result.bonuses:
            weekend_deliveries += 1

        for kind, amount in result.bonuses.items():
            bonus_breakdown[kind] = bonus_breakdown.get(kind, ZERO) + amount

    total_deliveries = len(results)
    target_achieved = total_deliveries >= policy.daily_target_deliveries
    target_bonus = policy.bonuses.daily_target if target_achieved else ZERO
    bonus_breakdown[BonusKind.DAILY_TARGET] = target_bonus

    final_total = total_earnings + target_bonus

    if day is None and results:
        try:
            day = min(result.delivery_time for result in results).date()
        except TypeError:
            raise InvalidTimestamp("cannot mix naive and timezone-aware delivery times in one day") from None

    logger.debug(
        "Daily summary %s: %d deliveries, earnings=%s, target_bonus=%s",
        day, total_deliveries, final_total, target_bonus,
    )

    return DailySummary(
        day=day,
        total_deliveries=total_deliveries,
        free_deliveries=free_deliveries,
        paid_deliveries=total_deliveries - free_deliveries,
        peak_hour_deliveries=peak_hour_deliveries,
        weekend_deliveries=weekend_deliveries,
        total_earnings=quantize(final_total),
        total_base_earnings=quantize(total_base_earnings),
        total_bonuses=quantize(total_bonuses + target_bonus),
        target_achieved=target_achieved,
        target_bonus=quantize(target_bonus),
        deliveries_needed_for_target=max(0, policy.daily_target_deliveries - total_deliveries),
        average_earnings_per_delivery=_average(final_total, total_deliveries),
        bonus_breakdown={kind: quantize(amount) for kind, amount in bonus_breakdown.items()},
        deliveries=results,
    )


def _sum_days(daily_summaries: Sequence[DailySummary]):
    total_deliveries = sum(d.total_deliveries for d in daily_summaries)
    total_earnings = sum((d.total_earnings for d in daily_summaries), ZERO)
    total_base_earnings = sum((d.total_base_earnings for d in daily_summaries), ZERO)
    total_bonuses = sum((d.total_bonuses for d in daily_summaries), ZERO)
    return total_deliveries, total_earnings, total_base_earnings, total_bonuses


def week_bounds(reference: Union[date, datetime]):
    """
    Sunday-to-Saturday week containing `reference`.
    """
    reference = _as_date(reference)
    # weekday(): Monday = 0 ... Sunday = 6
    start = reference - timedelta(days=(reference.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def aggregate_weekly(
    daily_summaries: Sequence[DailySummary],
    *,
    as_of: Optional[Union[date, datetime]] = None,
    policy: Optional[PolicyConfig] = None,
) -> WeeklySummary:
    """
    Fold a week's DailySummary rows and apply the flat weekly-target bonus.
    """
    policy = resolve_policy(policy)
    daily_summaries = list(daily_summaries)

    total_deliveries, total_earnings, total_base_earnings, total_bonuses = _sum_days(daily_summaries)

    target_achieved = total_deliveries >= policy.weekly_target_deliveries
    target_bonus = policy.bonuses.weekly_target if target_achieved else ZERO
    final_total = total_earnings + target_bonus

    if as_of is None:
        days = [d.day for d in daily_summaries if d.day is not None]
        as_of = max(days) if days else None

    week_start, week_end = week_bounds(as_of) if as_of is not None else (None, None)

    logger.debug(
        "Weekly summary %s..%s: %d deliveries, earnings=%s, target_bonus=%s",
        week_start, week_end, total_deliveries, final_total, target_bonus,
    )

    return WeeklySummary(
        week_start=week_start,
        week_end=week_end,
        total_deliveries=total_deliveries,
        total_earnings=quantize(final_total),
        total_base_earnings=quantize(total_base_earnings),
        total_bonuses=quantize(total_bonuses + target_bonus),
        target_achieved=target_achieved,
        target_bonus=quantize(target_bonus),
        deliveries_needed_for_target=max(0, policy.weekly_target_deliveries - total_deliveries),
        average_earnings_per_delivery=_average(final_total, total_deliveries),
        average_per_day=quantize(final_total / policy.days_per_week),
        daily_breakdown=daily_summaries,
    )


def aggregate_monthly(
    daily_summaries: Sequence[DailySummary],
    *,
    as_of: Union[date, datetime],
    policy: Optional[PolicyConfig] = None,
) -> MonthlySummary:
    """
    Fold a month's DailySummary rows and apply the flat monthly-target bonus.

    average_per_day = total / as_of.day, i.e. a month-to-date run rate.
    """
    policy = resolve_policy(policy)
    daily_summaries = list(daily_summaries)
    as_of = _as_date(as_of)

    total_deliveries, total_earnings, total_base_earnings, total_bonuses = _sum_days(daily_summaries)

    target_achieved = total_deliveries >= policy.monthly_target_deliveries
    target_bonus = policy.bonuses.monthly_target if target_achieved else ZERO
    final_total = total_earnings + target_bonus

    logger.debug(
        "Monthly summary %s: %d deliveries, earnings=%s, target_bonus=%s",
        as_of.strftime("%Y-%m"), total_deliveries, final_total, target_bonus,
    )

    return MonthlySummary(
        month=as_of.strftime("%Y-%m"),
        total_deliveries=total_deliveries,
        total_earnings=quantize(final_total),
        total_base_earnings=quantize(total_base_earnings),
        total_bonuses=quantize(total_bonuses + target_bonus),
        target_achieved=target_achieved,
        target_bonus=quantize(target_bonus),
        deliveries_needed_for_target=max(0, policy.monthly_target_deliveries - total_deliveries),
        average_earnings_per_delivery=_average(final_total, total_deliveries),
        average_per_day=quantize(final_total / as_of.day),
        daily_breakdown=daily_summaries,
    )


# --- Raw delivery helpers ---

def group_by_day(
    deliveries: Iterable[OrderSnapshot],
    *,
    now: Optional[TimestampLike] = None,
) -> Dict[date, List[OrderSnapshot]]:
    """
    Bucket deliveries by the calendar day of their effective delivery time, in date order.
    """
    buckets: Dict[date, List[OrderSnapshot]] = {}
    for order in deliveries:
        day = effective_delivery_time(order, now=now).date()
        buckets.setdefault(day, []).append(order)
    return dict(sorted(buckets.items()))


def deliveries_on(
    deliveries: Iterable[OrderSnapshot],
    day: Union[date, datetime],
    *,
    now: Optional[TimestampLike] = None,
) -> List[OrderSnapshot]:
    day = _as_date(day)
    return [order for order in deliveries if effective_delivery_time(order, now=now).date() == day]


def aggregate_daily_breakdown(
    deliveries: Iterable[OrderSnapshot],
    *,
    now: Optional[TimestampLike] = None,
    policy: Optional[PolicyConfig] = None,
) -> List[DailySummary]:
    """
    One DailySummary per calendar day, each with its own daily-target bonus.
    """
    return [
        aggregate_daily(day_deliveries, day=day, now=now, policy=policy)
        for day, day_deliveries in group_by_day(deliveries, now=now).items()
    ]
