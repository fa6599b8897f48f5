"""
Pricing domain package.

Public API:
- Policy: PolicyConfig, BonusSchedule, default_policy, policy_from_env
- Fee quote: compute_delivery_fee, DeliveryFeeQuote
- Money helpers: InvalidAmount, to_money, quantize, format_money
"""
from .money import InvalidAmount, Money, format_money, quantize, to_money
from .policy import BonusSchedule, PolicyConfig, default_policy, policy_from_env
from .fees import DeliveryFeeQuote, compute_delivery_fee

__all__ = [
    "BonusSchedule",
    "DeliveryFeeQuote",
    "InvalidAmount",
    "Money",
    "PolicyConfig",
    "compute_delivery_fee",
    "default_policy",
    "format_money",
    "policy_from_env",
    "quantize",
    "to_money",
]
