import pandas as pd
import numpy as np
from datetime import datetime, timedelta

def generate_mock_deliveries(num_days=30, partner_id="DP-001", output_file="mock_deliveries.csv", end_date=None, seed=None):
    """
    Generates a realistic month of completed deliveries for one delivery partner.
    Delivery times cluster around the lunch/evening rush so peak-hour bonuses show up,
    and basket values straddle the ₹199 free-delivery line so both payout tiers appear.
    """
    rng = np.random.default_rng(seed)
    end_date = end_date or datetime.now().date()
    start_date = end_date - timedelta(days=num_days - 1)

    # Hours partners are typically on the road, weighted toward the rush windows
    hours = np.arange(9, 22)
    hour_weights = np.array([3, 4, 5, 5, 4, 3, 3, 3, 4, 6, 6, 5, 3], dtype=float)
    hour_weights /= hour_weights.sum()

    data = []
    order_index = 0

    for day_offset in range(num_days):
        day = start_date + timedelta(days=day_offset)

        # Busier on weekends; some days clear the 12-delivery target, some don't
        mean_deliveries = 13 if day.weekday() >= 5 else 10
        deliveries_today = int(rng.poisson(mean_deliveries))

        for _ in range(deliveries_today):
            order_index += 1
            delivered_at = datetime(day.year, day.month, day.day, int(rng.choice(hours, p=hour_weights)), int(rng.integers(0, 60)))

            data.append({
                "order_id": f"ORD-{str(order_index).zfill(6)}",
                "partner_id": partner_id,
                "delivered_at": delivered_at.isoformat(),
                "status": "DELIVERED",
                "unit_price": np.round(rng.uniform(20.0, 120.0), 2),
                "quantity": int(rng.integers(1, 5)),
            })

    df = pd.DataFrame(data)
    df.to_csv(output_file, index=False)
    print(f"Generated {len(df)} deliveries over {num_days} days and saved to '{output_file}'")

    # Quick preview of how many days would hit the daily target
    per_day = pd.to_datetime(df["delivered_at"]).dt.date.value_counts()
    print(f"Days with 12+ deliveries: {(per_day >= 12).sum()} / {num_days}")
    return df

if __name__ == "__main__":
    generate_mock_deliveries(num_days=30)
