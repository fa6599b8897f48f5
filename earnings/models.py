"""
Purpose: Result types for the partner earnings capability.
What it does:
Defines the value objects returned by the calculator, aggregation and
projection modules. All money fields are Decimal quantized to 2 places.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class DeliveryType(str, Enum):
    FREE_DELIVERY = "FREE_DELIVERY"
    PAID_DELIVERY = "PAID_DELIVERY"


class BonusKind(str, Enum):
    PEAK_HOUR = "peakHour"
    WEEKEND = "weekend"
    BAD_WEATHER = "badWeather"
    DAILY_TARGET = "dailyTarget"
    WEEKLY_TARGET = "weeklyTarget"
    MONTHLY_TARGET = "monthlyTarget"
    RATING = "ratingBonus"


@dataclass(frozen=True)
class DeliveryEarningsResult:
    """
    What the partner earned on one delivery, and who paid for it.

    platform_net_revenue is signed: negative is a platform cost (free delivery),
    positive is the platform's margin on a paid delivery.
    """
    order_id: Optional[str]
    order_amount: Decimal
    delivery_type: DeliveryType
    base_earnings: Decimal
    bonuses: Dict[BonusKind, Decimal]
    total_bonuses: Decimal
    total_earnings: Decimal
    customer_paid: Decimal
    platform_paid: Decimal
    platform_net_revenue: Decimal
    delivery_time: datetime

    # True when an empty/malformed cart forced the subtotal to 0
    subtotal_fallback: bool = False

    @property
    def is_free_delivery(self) -> bool:
        return self.delivery_type == DeliveryType.FREE_DELIVERY


@dataclass(frozen=True)
class DailySummary:
    day: Optional[date]
    total_deliveries: int
    free_deliveries: int
    paid_deliveries: int
    peak_hour_deliveries: int
    weekend_deliveries: int
    total_earnings: Decimal
    total_base_earnings: Decimal
    total_bonuses: Decimal
    target_achieved: bool
    target_bonus: Decimal
    deliveries_needed_for_target: int
    average_earnings_per_delivery: Decimal
    bonus_breakdown: Dict[BonusKind, Decimal] = field(default_factory=dict)
    deliveries: List[DeliveryEarningsResult] = field(default_factory=list)


@dataclass(frozen=True)
class WeeklySummary:
    week_start: Optional[date]
    week_end: Optional[date]
    total_deliveries: int
    total_earnings: Decimal
    total_base_earnings: Decimal
    total_bonuses: Decimal
    target_achieved: bool
    target_bonus: Decimal
    deliveries_needed_for_target: int
    average_earnings_per_delivery: Decimal
    average_per_day: Decimal
    daily_breakdown: List[DailySummary] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlySummary:
    month: str  # YYYY-MM
    total_deliveries: int
    total_earnings: Decimal
    total_base_earnings: Decimal
    total_bonuses: Decimal
    target_achieved: bool
    target_bonus: Decimal
    deliveries_needed_for_target: int
    average_earnings_per_delivery: Decimal
    average_per_day: Decimal
    daily_breakdown: List[DailySummary] = field(default_factory=list)
