"""
Purpose: Customer-facing delivery fee quote.
What it does:
Given an order's item subtotal, decides free vs paid delivery and builds the
checkout advisory texts ("Add ₹49.00 more for FREE delivery!").
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .money import ZERO, AmountLike, Money, format_money, quantize, to_money
from .policy import PolicyConfig, resolve_policy


@dataclass(frozen=True)
class DeliveryFeeQuote:
    order_amount: Money
    is_free_delivery: bool
    delivery_fee: Money
    total_amount: Money
    savings: Money
    amount_needed_for_free_delivery: Money
    promotion_text: Optional[str] = None
    savings_text: Optional[str] = None


def compute_delivery_fee(subtotal: AmountLike, policy: Optional[PolicyConfig] = None) -> DeliveryFeeQuote:
    """
    Quote the delivery fee for an item subtotal.

    Raises InvalidAmount for negative or non-numeric subtotals.
    """
    policy = resolve_policy(policy)
    amount = to_money(subtotal, "subtotal")

    is_free_delivery = amount >= policy.free_delivery_threshold
    delivery_fee = ZERO if is_free_delivery else policy.delivery_fee

    if is_free_delivery:
        savings = policy.delivery_fee
        amount_needed = ZERO
        savings_text = f"You saved {format_money(savings, policy.currency_symbol)} on delivery!"
        promotion_text = None
    else:
        savings = ZERO
        amount_needed = policy.free_delivery_threshold - amount
        savings_text = None
        promotion_text = (
            f"Add {format_money(amount_needed, policy.currency_symbol)} more for FREE delivery!"
        )

    return DeliveryFeeQuote(
        order_amount=quantize(amount),
        is_free_delivery=is_free_delivery,
        delivery_fee=quantize(delivery_fee),
        total_amount=quantize(amount + delivery_fee),
        savings=quantize(savings),
        amount_needed_for_free_delivery=quantize(amount_needed),
        promotion_text=promotion_text,
        savings_text=savings_text,
    )
