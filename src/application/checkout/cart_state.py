"""
Cart state

Explicit, injectable holder for what the shopper is buying. The checkout
session reads it through snapshot() so verification always sees the live
cart, not the one captured when the payment window opened.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from src.domain.value_objects.coupon_code import CouponCode


@dataclass(frozen=True)
class CartSnapshot:
    """Immutable copy of the cart at one moment"""

    items: Tuple[Dict[str, Any], ...] = ()
    coupon_code: Optional[str] = None
    delivery_zone: Optional[str] = None
    total_weight: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def delivery_type(self) -> str:
        return "delivery" if self.delivery_zone else "pickup"

    def to_payload(self) -> Dict[str, Any]:
        """Request body fields shared by calculate-total, process and create"""
        return {
            "items": [dict(item) for item in self.items],
            "couponCode": self.coupon_code,
            "deliveryZone": self.delivery_zone,
            "totalWeight": self.total_weight,
        }


@dataclass
class CartState:
    """Mutable cart owned by the storefront session"""

    items: List[Dict[str, Any]] = field(default_factory=list)
    coupon_code: Optional[str] = None
    delivery_zone: Optional[str] = None
    total_weight: float = 0.0

    def add_item(self, product_id: Optional[str], quantity: int = 1, **extra: Any):
        """Add a line; adding an existing product id increases its quantity"""
        if product_id:
            for item in self.items:
                if item.get("productId") == product_id and not extra.get("options"):
                    item["quantity"] = item.get("quantity", 1) + quantity
                    return
        self.items.append({"productId": product_id, "quantity": quantity, **extra})

    def remove_item(self, product_id: str):
        self.items = [item for item in self.items if item.get("productId") != product_id]

    def apply_coupon(self, code: str):
        parsed = CouponCode.parse(code)
        self.coupon_code = parsed.value if parsed else None

    def clear_coupon(self):
        self.coupon_code = None

    def set_delivery(self, zone: Optional[str], total_weight: float = 0.0):
        """A None zone means pickup"""
        self.delivery_zone = zone or None
        self.total_weight = total_weight

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(
            items=tuple(dict(item) for item in self.items),
            coupon_code=self.coupon_code,
            delivery_zone=self.delivery_zone,
            total_weight=self.total_weight,
        )

    def clear(self):
        """Empty the cart and drop the cached coupon"""
        self.items = []
        self.coupon_code = None
        self.delivery_zone = None
        self.total_weight = 0.0
