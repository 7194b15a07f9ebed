"""
Domain services

Stateless business rules that span several entities.
"""

from .pricing import (
    AmountValidation,
    DiscountSelection,
    PricingPolicy,
    calculate_delivery_cost,
    calculate_discount_amount,
    calculate_tax,
    select_discount,
    validate_amount,
)

__all__ = [
    "AmountValidation",
    "DiscountSelection",
    "PricingPolicy",
    "calculate_delivery_cost",
    "calculate_discount_amount",
    "calculate_tax",
    "select_discount",
    "validate_amount",
]
