"""
Partner earnings package.

Public API:
- Per delivery: compute_delivery_earnings, time_bonuses, current_bonus_status, format_bonus_breakdown
- Roll-ups: aggregate_daily, aggregate_weekly, aggregate_monthly, aggregate_daily_breakdown
- Projection: project_shift_earnings, hours_worked_since_shift_start
- Result types: DeliveryEarningsResult, DailySummary, WeeklySummary, MonthlySummary, ShiftProjection
"""

from .models import (
    BonusKind,
    DailySummary,
    DeliveryEarningsResult,
    DeliveryType,
    MonthlySummary,
    WeeklySummary,
)
from .calculator import (
    compute_delivery_earnings,
    current_bonus_status,
    format_bonus_breakdown,
    time_bonuses,
)
from .aggregation import (
    aggregate_daily,
    aggregate_daily_breakdown,
    aggregate_monthly,
    aggregate_weekly,
    deliveries_on,
    group_by_day,
)
from .projection import ShiftProjection, hours_worked_since_shift_start, project_shift_earnings

__all__ = [
    "BonusKind",
    "DailySummary",
    "DeliveryEarningsResult",
    "DeliveryType",
    "MonthlySummary",
    "ShiftProjection",
    "WeeklySummary",
    "aggregate_daily",
    "aggregate_daily_breakdown",
    "aggregate_monthly",
    "aggregate_weekly",
    "compute_delivery_earnings",
    "current_bonus_status",
    "deliveries_on",
    "format_bonus_breakdown",
    "group_by_day",
    "hours_worked_since_shift_start",
    "project_shift_earnings",
    "time_bonuses",
]
