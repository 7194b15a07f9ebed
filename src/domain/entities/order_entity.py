"""
Order Entity - a settled purchase
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from src.domain.entities.order_total import OrderTotal


@dataclass
class OrderItem:
    """Line item with its name resolved for the buyer's language"""

    name: str
    price: Decimal
    quantity: int
    product_id: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": float(self.price),
            "quantity": self.quantity,
            "options": self.options,
        }


@dataclass
class Order:
    """Order domain entity"""

    id: Optional[int]
    user_id: str
    items: List[OrderItem]
    totals: OrderTotal
    user_email: Optional[str] = None
    coupon_code: Optional[str] = None
    transaction_id: Optional[str] = None
    payment_method: Optional[str] = None
    delivery_type: str = "pickup"
    delivery_zone: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    language: str = "en"
    status: str = "pending"
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.items:
            raise ValueError("Order must contain at least one item")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "userEmail": self.user_email,
            "items": [item.to_dict() for item in self.items],
            **self.totals.to_dict(),
            "couponCode": self.coupon_code,
            "transactionId": self.transaction_id,
            "paymentMethod": self.payment_method,
            "deliveryType": self.delivery_type,
            "deliveryZone": self.delivery_zone,
            "shippingAddress": self.shipping_address,
            "phone": self.phone,
            "notes": self.notes,
            "language": self.language,
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
