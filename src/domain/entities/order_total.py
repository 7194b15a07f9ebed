"""
Order total - the transient, derived price breakdown of a cart
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict


class DiscountType(str, Enum):
    """Which discount rule produced the discount amount"""

    COUPON = "coupon"
    NEW_USER = "new_user"
    NONE = "none"


@dataclass(frozen=True)
class OrderTotal:
    """Price breakdown computed from cart, coupon and delivery selection"""

    subtotal_before_discount: Decimal
    discount_amount: Decimal
    discount_type: DiscountType
    subtotal_after_discount: Decimal
    tax: Decimal
    delivery_cost: Decimal
    total: Decimal
    discount_percentage: Decimal = Decimal("0")

    def __post_init__(self):
        """Enforce the arithmetic invariants of the breakdown"""
        if not Decimal("0") <= self.discount_amount <= self.subtotal_before_discount:
            raise ValueError(
                f"Discount {self.discount_amount} outside [0, {self.subtotal_before_discount}]"
            )
        if self.subtotal_after_discount != self.subtotal_before_discount - self.discount_amount:
            raise ValueError("Subtotal after discount does not match subtotal minus discount")
        if self.total != self.subtotal_after_discount + self.tax + self.delivery_cost:
            raise ValueError("Total must equal discounted subtotal plus tax plus delivery")
        if self.discount_type is DiscountType.NONE and self.discount_amount:
            raise ValueError("A discount amount requires a discount type")

    @property
    def has_discount(self) -> bool:
        return self.discount_amount > 0

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape returned by the calculate-total endpoint"""
        discount = None
        if self.has_discount:
            discount = {
                "amount": float(self.discount_amount),
                "percentage": float(self.discount_percentage),
                "type": self.discount_type.value,
            }
        return {
            "total": float(self.total),
            "subtotal": float(self.subtotal_after_discount),
            "subtotalBeforeDiscount": float(self.subtotal_before_discount),
            "tax": float(self.tax),
            "deliveryCost": float(self.delivery_cost),
            "discount": discount,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrderTotal":
        """Rebuild an OrderTotal from the calculate-total wire shape"""
        discount = data.get("discount") or {}
        subtotal_after = Decimal(str(data["subtotal"]))
        discount_amount = Decimal(str(discount.get("amount", 0)))
        subtotal_before = Decimal(str(data.get("subtotalBeforeDiscount", subtotal_after + discount_amount)))
        return cls(
            subtotal_before_discount=subtotal_before,
            discount_amount=discount_amount,
            discount_type=DiscountType(discount.get("type", DiscountType.NONE.value)),
            subtotal_after_discount=subtotal_after,
            tax=Decimal(str(data.get("tax", 0))),
            delivery_cost=Decimal(str(data.get("deliveryCost", 0))),
            total=Decimal(str(data["total"])),
            discount_percentage=Decimal(str(discount.get("percentage", 0))),
        )
