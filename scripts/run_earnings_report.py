import logging
import os
import sys
from datetime import datetime, timedelta
from typing import List

import pandas as pd

from earnings.aggregation import aggregate_daily_breakdown, aggregate_monthly, aggregate_weekly
from earnings.calculator import format_bonus_breakdown
from earnings.projection import hours_worked_since_shift_start, project_shift_earnings
from orders.models import OrderSnapshot
from pricing.money import format_money
from pricing.policy import policy_from_env

def load_deliveries(filepath="mock_deliveries.csv") -> List[OrderSnapshot]:
    """
    Each CSV row is one delivered order with a single item line.
    """
    # Resolve the correct path depending on where the user runs the script from.
    base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    absolute_path = filepath if os.path.isabs(filepath) else os.path.join(base_dir, filepath)

    df = pd.read_csv(absolute_path, dtype={"unit_price": str})
    deliveries = []
    for _, row in df.iterrows():
        deliveries.append(
            OrderSnapshot.from_record({
                "id": row["order_id"],
                "status": row["status"],
                "deliveredAt": row["delivered_at"],
                "items": [{"price": row["unit_price"], "quantity": int(row["quantity"])}],
            })
        )
    return deliveries

def run_report(filepath="mock_deliveries.csv", now=None):
    print("=== PARTNER EARNINGS REPORT ===")

    policy = policy_from_env()
    deliveries = load_deliveries(filepath)
    print(f"Loaded {len(deliveries)} deliveries.\n")

    if not deliveries:
        print("Nothing to report.")
        return

    # Report "as of" the last delivery unless the caller pins a clock
    now = now or max(d.delivered_at for d in deliveries)
    symbol = policy.currency_symbol

    daily = aggregate_daily_breakdown(deliveries, policy=policy)

    print("--- Daily Summaries ---")
    for day in daily:
        flag = "TARGET" if day.target_achieved else f"{day.deliveries_needed_for_target} short"
        print(
            f"{day.day}: {day.total_deliveries:>3} deliveries | "
            f"{format_money(day.total_earnings, symbol):>10} | "
            f"free {day.free_deliveries} / paid {day.paid_deliveries} | {flag}"
        )

    week_start = now.date() - timedelta(days=6)
    this_week = [d for d in daily if d.day and week_start <= d.day <= now.date()]
    weekly = aggregate_weekly(this_week, as_of=now, policy=policy)
    print("\n--- Last 7 Days ---")
    print(f"Deliveries: {weekly.total_deliveries} (target {policy.weekly_target_deliveries})")
    print(f"Earnings: {format_money(weekly.total_earnings, symbol)} | Avg/day: {format_money(weekly.average_per_day, symbol)}")

    this_month = [d for d in daily if d.day and (d.day.year, d.day.month) == (now.year, now.month)]
    monthly = aggregate_monthly(this_month, as_of=now, policy=policy)
    print(f"\n--- Month {monthly.month} ---")
    print(f"Deliveries: {monthly.total_deliveries} (target {policy.monthly_target_deliveries})")
    print(f"Earnings: {format_money(monthly.total_earnings, symbol)} | Avg/day: {format_money(monthly.average_per_day, symbol)}")

    today = daily[-1]
    if today.deliveries:
        print(f"\nLast delivery bonuses: {format_bonus_breakdown(today.deliveries[-1].bonuses, policy)}")

    hours = hours_worked_since_shift_start(now, policy)
    projection = project_shift_earnings(today.total_deliveries, today.total_earnings - today.target_bonus, hours, policy)
    print("\n--- Shift Projection ---")
    print(f"Hours worked: {hours:.2f} | {projection.deliveries_per_hour} deliveries/h")
    print(
        f"Projected: {projection.projected_deliveries} deliveries, "
        f"{format_money(projection.projected_earnings, symbol)} "
        f"({'meets' if projection.will_meet_daily_target else 'misses'} daily target)"
    )

    print("\n=== REPORT COMPLETE ===")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    run_report(sys.argv[1] if len(sys.argv) > 1 else "mock_deliveries.csv")
