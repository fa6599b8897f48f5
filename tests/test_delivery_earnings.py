import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from earnings.calculator import (
    compute_delivery_earnings,
    current_bonus_status,
    format_bonus_breakdown,
    time_bonuses,
)
from earnings.models import BonusKind, DeliveryType
from orders.models import InvalidTimestamp, OrderItem, OrderSnapshot, OrderStatus
from pricing.money import InvalidAmount

SATURDAY_8AM = datetime(2024, 6, 1, 8, 0)
TUESDAY_2PM = datetime(2024, 6, 4, 14, 0)

def make_order(subtotal, delivered_at=None, order_id="o_1"):
    return OrderSnapshot(
        id=order_id,
        items=(OrderItem(unit_price=Decimal(str(subtotal)), quantity=1),),
        status=OrderStatus.DELIVERED,
        delivered_at=delivered_at,
    )

def test_free_delivery_on_saturday_peak_hour():
    """
    250 subtotal at 08:00 on a Saturday: base 25 + peak 5 + weekend 3.
    """
    result = compute_delivery_earnings(make_order(250), SATURDAY_8AM)

    assert result.delivery_type == DeliveryType.FREE_DELIVERY
    assert result.base_earnings == 25
    assert result.bonuses == {BonusKind.PEAK_HOUR: 5, BonusKind.WEEKEND: 3}
    assert result.total_bonuses == 8
    assert result.total_earnings == 33

    # Platform funds free deliveries
    assert result.customer_paid == 0
    assert result.platform_paid == 25
    assert result.platform_net_revenue == -25

def test_paid_delivery_on_weekday_afternoon_has_no_bonuses():
    result = compute_delivery_earnings(make_order(150), TUESDAY_2PM)

    assert result.delivery_type == DeliveryType.PAID_DELIVERY
    assert result.base_earnings == 30
    assert result.bonuses == {}
    assert result.total_bonuses == 0
    assert result.total_earnings == 30

    assert result.customer_paid == 40
    assert result.platform_paid == 0
    assert result.platform_net_revenue == 10

def test_subtotal_is_sum_of_price_times_quantity():
    order = OrderSnapshot(
        id="o_2",
        items=(
            OrderItem(unit_price=Decimal("49.50"), quantity=2),
            OrderItem(unit_price=Decimal("100"), quantity=1),
        ),
        delivered_at=TUESDAY_2PM,
    )

    result = compute_delivery_earnings(order)

    assert result.order_amount == Decimal("199.00")
    assert result.delivery_type == DeliveryType.FREE_DELIVERY

def test_identical_inputs_give_identical_results():
    order = make_order(120, SATURDAY_8AM)

    assert compute_delivery_earnings(order) == compute_delivery_earnings(order)

@pytest.mark.parametrize(
    "hour, expected_peak",
    [(6, False), (7, True), (9, True), (10, False), (17, False), (18, True), (20, True), (21, False)],
)
def test_peak_hour_windows_are_half_open(hour, expected_peak):
    bonuses = time_bonuses(datetime(2024, 6, 4, hour, 59))

    assert (BonusKind.PEAK_HOUR in bonuses) == expected_peak

def test_sunday_counts_as_weekend_monday_does_not():
    assert BonusKind.WEEKEND in time_bonuses(datetime(2024, 6, 2, 12, 0))
    assert BonusKind.WEEKEND not in time_bonuses(datetime(2024, 6, 3, 12, 0))

def test_bad_weather_bonus_only_on_explicit_override():
    order = make_order(150, TUESDAY_2PM)

    assert BonusKind.BAD_WEATHER not in compute_delivery_earnings(order).bonuses

    result = compute_delivery_earnings(order, bad_weather=True)
    assert result.bonuses[BonusKind.BAD_WEATHER] == 8
    assert result.total_earnings == 38

def test_explicit_delivery_time_wins_over_delivered_at():
    order = make_order(150, delivered_at=TUESDAY_2PM)

    result = compute_delivery_earnings(order, SATURDAY_8AM)

    assert result.delivery_time == SATURDAY_8AM
    assert result.total_bonuses == 8

def test_falls_back_to_order_time_then_now():
    order = OrderSnapshot(id="o_3", items=(OrderItem(Decimal("50"), 1),), order_time=SATURDAY_8AM)
    assert compute_delivery_earnings(order).delivery_time == SATURDAY_8AM

    untimed = OrderSnapshot(id="o_4", items=(OrderItem(Decimal("50"), 1),))
    assert compute_delivery_earnings(untimed, now=TUESDAY_2PM).delivery_time == TUESDAY_2PM

def test_missing_every_timestamp_raises():
    untimed = OrderSnapshot(id="o_5", items=(OrderItem(Decimal("50"), 1),))

    with pytest.raises(InvalidTimestamp):
        compute_delivery_earnings(untimed)

def test_unparsable_delivery_time_raises():
    with pytest.raises(InvalidTimestamp):
        compute_delivery_earnings(make_order(150), "yesterday afternoon")

def test_iso_string_delivery_time_keeps_its_own_offset():
    # 08:00 at +05:30 is still a peak hour for the partner, whatever UTC says
    result = compute_delivery_earnings(make_order(150), "2024-06-04T08:00:00+05:30")

    assert result.delivery_time.utcoffset() == timedelta(hours=5, minutes=30)
    assert BonusKind.PEAK_HOUR in result.bonuses

def test_empty_cart_falls_back_to_paid_tier_and_is_flagged(caplog):
    order = OrderSnapshot(id="o_empty", items=(), delivered_at=TUESDAY_2PM)

    with caplog.at_level("WARNING"):
        result = compute_delivery_earnings(order)

    assert result.subtotal_fallback
    assert result.order_amount == 0
    assert result.delivery_type == DeliveryType.PAID_DELIVERY
    assert result.base_earnings == 30
    assert "o_empty" in caplog.text

def test_item_missing_price_zeroes_the_whole_subtotal():
    order = OrderSnapshot(
        id="o_6",
        items=(OrderItem(Decimal("500"), 1), OrderItem(None, 2)),
        delivered_at=TUESDAY_2PM,
    )

    result = compute_delivery_earnings(order)

    assert result.subtotal_fallback
    assert result.order_amount == 0
    assert result.delivery_type == DeliveryType.PAID_DELIVERY

def test_negative_price_is_an_error_not_a_fallback():
    order = OrderSnapshot(id="o_7", items=(OrderItem(Decimal("-10"), 1),), delivered_at=TUESDAY_2PM)

    with pytest.raises(InvalidAmount):
        compute_delivery_earnings(order)

def test_from_record_reads_backend_shapes():
    record = {
        "id": 42,
        "status": "delivered",
        "orderTime": "2024-06-01T07:40:00Z",
        "deliveredAt": "2024-06-01T08:05:00Z",
        "items": [
            {"price": 120, "quantity": 1},
            {"product": {"price": "40.00"}, "quantity": 2},
        ],
    }

    order = OrderSnapshot.from_record(record)

    assert order.id == "42"
    assert order.status == OrderStatus.DELIVERED
    assert order.delivered_at == datetime(2024, 6, 1, 8, 5, tzinfo=timezone.utc)
    assert compute_delivery_earnings(order).order_amount == Decimal("200.00")

def test_from_record_rejects_negative_quantity():
    with pytest.raises(InvalidAmount):
        OrderSnapshot.from_record({"items": [{"price": 10, "quantity": -1}]})

def test_current_bonus_status_uses_supplied_clock():
    status = current_bonus_status(SATURDAY_8AM)

    assert status["is_peak_hour"] is True
    assert status["is_weekend"] is True
    assert status["peak_hour_bonus"] == 5
    assert status["weekend_bonus"] == 3

    quiet = current_bonus_status(TUESDAY_2PM)
    assert quiet["peak_hour_bonus"] == 0 and quiet["weekend_bonus"] == 0

def test_format_bonus_breakdown():
    result = compute_delivery_earnings(make_order(250), SATURDAY_8AM)

    assert format_bonus_breakdown(result.bonuses) == "Peak Hour: +₹5, Weekend: +₹3"
    assert format_bonus_breakdown({}) == "No bonuses"
