"""
Purpose: Central configuration for delivery pricing and partner payouts (single source of truth).
What it does:

Stores every threshold, fee and bonus amount the economics engine reads:

FREE_DELIVERY_THRESHOLD = 199

DELIVERY_FEE = 40

PARTNER_EARNINGS_PAID = 30   (platform keeps 10)

PARTNER_EARNINGS_FREE = 25   (platform pays the partner)

DAILY / WEEKLY / MONTHLY target deliveries = 12 / 80 / 320

CANCELLATION_WINDOW_SECONDS = 120

Optionally loads overrides from the environment (.env) for staging / tests.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Tuple

from dotenv import load_dotenv

HourWindow = Tuple[int, int]


def _as_decimal(value: Any, name: str) -> Decimal:
    """
    Plain ints (or numeric strings) are accepted for money fields so a policy
    can be written as PolicyConfig(delivery_fee=50).
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{name} must be numeric, got {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"{name} must be numeric, got {value!r}") from None
    if not amount.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    return amount


def _coerce_money_fields(instance: Any) -> None:
    # frozen dataclass, so bypass __setattr__
    for f in fields(instance):
        if f.type in ("Decimal", Decimal):
            object.__setattr__(instance, f.name, _as_decimal(getattr(instance, f.name), f.name))


@dataclass(frozen=True)
class BonusSchedule:
    """
    Flat bonus amounts. Per-delivery bonuses (peak hour, weekend, bad weather)
    stack on a single order; target bonuses are paid once per period.
    """
    peak_hour: Decimal = Decimal("5")
    weekend: Decimal = Decimal("3")

    # No automatic trigger: applied only when the caller passes bad_weather=True.
    bad_weather: Decimal = Decimal("8")

    daily_target: Decimal = Decimal("80")
    weekly_target: Decimal = Decimal("400")
    monthly_target: Decimal = Decimal("1500")

    # Carried for completeness; nothing in the engine awards it automatically.
    rating_bonus: Decimal = Decimal("100")

    def __post_init__(self) -> None:
        _coerce_money_fields(self)


@dataclass(frozen=True)
class PolicyConfig:
    """
    Central configuration for delivery fees, partner earnings and bonuses.

    Notes:
    - Pricing tier is decided on the item subtotal only, never on a total
      that already includes the delivery fee.
    - partner_earnings_paid must stay below delivery_fee so paid deliveries
      leave the platform a margin. partner_earnings_free is a pure platform cost.
    """

    # --- Customer pricing ---
    free_delivery_threshold: Decimal = Decimal("199")
    delivery_fee: Decimal = Decimal("40")

    # --- Partner payouts ---
    partner_earnings_paid: Decimal = Decimal("30")
    partner_earnings_free: Decimal = Decimal("25")

    bonuses: BonusSchedule = field(default_factory=BonusSchedule)

    # --- Volume targets (deliveries per period) ---
    daily_target_deliveries: int = 12
    weekly_target_deliveries: int = 80
    monthly_target_deliveries: int = 320

    # --- Time windows ---
    # Half-open local-hour ranges: 7-10 AM and 6-9 PM.
    peak_hour_windows: Tuple[HourWindow, ...] = ((7, 10), (18, 21))
    # datetime.weekday(): Saturday = 5, Sunday = 6
    weekend_days: Tuple[int, ...] = (5, 6)

    cancellation_window_seconds: int = 120

    # --- Shift projection ---
    reference_shift_hours: int = 8
    shift_start_hour: int = 9
    days_per_week: int = 7

    currency_symbol: str = "₹"

    def __post_init__(self) -> None:
        _coerce_money_fields(self)

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup if you want.
        """
        amounts = {
            "free_delivery_threshold": self.free_delivery_threshold,
            "delivery_fee": self.delivery_fee,
            "partner_earnings_paid": self.partner_earnings_paid,
            "partner_earnings_free": self.partner_earnings_free,
            "bonuses.peak_hour": self.bonuses.peak_hour,
            "bonuses.weekend": self.bonuses.weekend,
            "bonuses.bad_weather": self.bonuses.bad_weather,
            "bonuses.daily_target": self.bonuses.daily_target,
            "bonuses.weekly_target": self.bonuses.weekly_target,
            "bonuses.monthly_target": self.bonuses.monthly_target,
            "bonuses.rating_bonus": self.bonuses.rating_bonus,
        }
        for name, amount in amounts.items():
            if amount < 0:
                raise ValueError(f"{name} must be >= 0")

        if self.partner_earnings_paid >= self.delivery_fee:
            raise ValueError("partner_earnings_paid must be < delivery_fee")

        if self.daily_target_deliveries <= 0:
            raise ValueError("daily_target_deliveries must be > 0")

        if self.weekly_target_deliveries <= 0 or self.monthly_target_deliveries <= 0:
            raise ValueError("weekly/monthly target deliveries must be > 0")

        if self.cancellation_window_seconds <= 0:
            raise ValueError("cancellation_window_seconds must be > 0")

        for start, end in self.peak_hour_windows:
            if not 0 <= start < end <= 24:
                raise ValueError(f"invalid peak hour window ({start}, {end})")

        for day in self.weekend_days:
            if not 0 <= day <= 6:
                raise ValueError(f"invalid weekend day {day}")

        if self.reference_shift_hours <= 0:
            raise ValueError("reference_shift_hours must be > 0")

        if not 0 <= self.shift_start_hour < 24:
            raise ValueError("shift_start_hour must be within 0..23")

        if self.days_per_week <= 0:
            raise ValueError("days_per_week must be > 0")


def default_policy() -> PolicyConfig:
    """
    Convenience factory for the default policy.
    """
    p = PolicyConfig()
    p.validate()
    return p


def resolve_policy(policy: PolicyConfig | None) -> PolicyConfig:
    return policy if policy is not None else DEFAULT_POLICY


def policy_from_env() -> PolicyConfig:
    """
    Build a policy from environment variables, falling back to defaults.

    Example .env:
    FREE_DELIVERY_THRESHOLD=249
    DELIVERY_FEE=45
    """
    load_dotenv()

    base = PolicyConfig()
    try:
        p = replace(
            base,
            free_delivery_threshold=Decimal(os.getenv("FREE_DELIVERY_THRESHOLD", str(base.free_delivery_threshold))),
            delivery_fee=Decimal(os.getenv("DELIVERY_FEE", str(base.delivery_fee))),
            partner_earnings_paid=Decimal(os.getenv("PARTNER_EARNINGS_PAID", str(base.partner_earnings_paid))),
            partner_earnings_free=Decimal(os.getenv("PARTNER_EARNINGS_FREE", str(base.partner_earnings_free))),
            daily_target_deliveries=int(os.getenv("DAILY_TARGET_DELIVERIES", base.daily_target_deliveries)),
            weekly_target_deliveries=int(os.getenv("WEEKLY_TARGET_DELIVERIES", base.weekly_target_deliveries)),
            monthly_target_deliveries=int(os.getenv("MONTHLY_TARGET_DELIVERIES", base.monthly_target_deliveries)),
            cancellation_window_seconds=int(os.getenv("CANCELLATION_WINDOW_SECONDS", base.cancellation_window_seconds)),
        )
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"invalid policy override in environment: {e}") from e
    p.validate()
    return p


DEFAULT_POLICY = default_policy()
