import pytest
from dataclasses import FrozenInstanceError, replace
from datetime import datetime
from decimal import Decimal

from earnings.calculator import compute_delivery_earnings
from orders.models import OrderItem, OrderSnapshot, OrderStatus
from pricing.fees import compute_delivery_fee
from pricing.policy import BonusSchedule, PolicyConfig, default_policy, policy_from_env

def test_default_policy_values():
    policy = default_policy()

    assert policy.free_delivery_threshold == 199
    assert policy.delivery_fee == 40
    assert policy.partner_earnings_paid == 30
    assert policy.partner_earnings_free == 25
    assert policy.bonuses == BonusSchedule()
    assert (policy.daily_target_deliveries, policy.weekly_target_deliveries, policy.monthly_target_deliveries) == (12, 80, 320)
    assert policy.cancellation_window_seconds == 120

    # Platform keeps a margin on paid deliveries
    assert policy.partner_earnings_paid < policy.delivery_fee

def test_policy_is_immutable():
    policy = default_policy()

    with pytest.raises(FrozenInstanceError):
        policy.delivery_fee = Decimal("0")

@pytest.mark.parametrize(
    "overrides",
    [
        {"partner_earnings_paid": Decimal("40")},
        {"delivery_fee": Decimal("-1")},
        {"daily_target_deliveries": 0},
        {"cancellation_window_seconds": 0},
        {"peak_hour_windows": ((10, 7),)},
        {"weekend_days": (7,)},
        {"bonuses": BonusSchedule(weekend=Decimal("-3"))},
    ],
)
def test_validate_rejects_inconsistent_policy(overrides):
    with pytest.raises(ValueError):
        replace(PolicyConfig(), **overrides).validate()

def test_policy_from_env_overrides(monkeypatch):
    monkeypatch.setenv("FREE_DELIVERY_THRESHOLD", "249")
    monkeypatch.setenv("DELIVERY_FEE", "45")
    monkeypatch.setenv("DAILY_TARGET_DELIVERIES", "15")
    monkeypatch.setenv("CANCELLATION_WINDOW_SECONDS", "180")

    policy = policy_from_env()

    assert policy.free_delivery_threshold == 249
    assert policy.delivery_fee == 45
    assert policy.daily_target_deliveries == 15
    assert policy.cancellation_window_seconds == 180
    # untouched values keep their defaults
    assert policy.partner_earnings_paid == 30

def test_policy_from_env_validates(monkeypatch):
    monkeypatch.setenv("PARTNER_EARNINGS_PAID", "50")

    with pytest.raises(ValueError):
        policy_from_env()

def test_plain_int_overrides_are_stored_as_decimal():
    policy = PolicyConfig(delivery_fee=50, partner_earnings_paid=20, bonuses=BonusSchedule(peak_hour=7))
    policy.validate()

    assert isinstance(policy.delivery_fee, Decimal)
    assert isinstance(policy.bonuses.peak_hour, Decimal)
    assert replace(policy, free_delivery_threshold=249).free_delivery_threshold == Decimal("249")

def test_plain_int_overrides_run_through_both_calculators():
    policy = PolicyConfig(delivery_fee=50, partner_earnings_paid=20, bonuses=BonusSchedule(peak_hour=7))

    quote = compute_delivery_fee(100, policy)
    assert quote.delivery_fee == Decimal("50.00")
    assert quote.total_amount == Decimal("150.00")

    order = OrderSnapshot(
        id="o_1",
        items=(OrderItem(unit_price=Decimal("150"), quantity=1),),
        status=OrderStatus.DELIVERED,
    )
    # Tuesday 8:30 AM: peak hour only
    result = compute_delivery_earnings(order, datetime(2024, 6, 4, 8, 30), policy=policy)

    assert result.base_earnings == 20
    assert result.total_earnings == 27
    assert result.customer_paid == 50
    assert result.platform_net_revenue == 30

@pytest.mark.parametrize("bad", ["abc", None, True])
def test_non_numeric_money_field_is_rejected(bad):
    with pytest.raises(ValueError):
        PolicyConfig(delivery_fee=bad)

@pytest.mark.parametrize(
    "name, value",
    [
        ("DELIVERY_FEE", "abc"),
        ("FREE_DELIVERY_THRESHOLD", ""),
        ("DAILY_TARGET_DELIVERIES", "twelve"),
    ],
)
def test_policy_from_env_rejects_unparsable_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        policy_from_env()
