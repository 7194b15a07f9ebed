"""
Payment DTOs

Data Transfer Objects for total calculation and payment verification.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.domain.entities.order_total import OrderTotal


@dataclass
class CartItemInput:
    """Cart line as sent by the storefront"""

    product_id: Optional[str] = None
    quantity: Any = None
    price: Any = None
    name: Any = None
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_custom(self) -> bool:
        """Custom items carry no product id and are priced by the client"""
        return not self.product_id

    @property
    def label(self) -> str:
        if isinstance(self.name, str) and self.name:
            return self.name
        return self.product_id or "Unknown"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartItemInput":
        """Accept both productId and id as the product reference"""
        product_id = data.get("productId") or data.get("id") or None
        return cls(
            product_id=str(product_id) if product_id else None,
            quantity=data.get("quantity"),
            price=data.get("price"),
            name=data.get("name"),
            options=data.get("options") or {},
        )


@dataclass
class CalculateTotalRequest:
    """Request to price a cart"""

    user_id: str
    items: List[CartItemInput] = field(default_factory=list)
    subtotal: Any = None
    coupon_code: Optional[str] = None
    delivery_zone: Optional[str] = None
    total_weight: Any = 0
    client_delivery_cost: Any = None


@dataclass
class TotalCalculationResponse:
    """Priced cart"""

    totals: OrderTotal
    request_id: str
    coupon_code: Optional[str] = None
    coupon_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        body = self.totals.to_dict()
        if self.coupon_code and self.coupon_error is None:
            body["couponCode"] = self.coupon_code
        if self.coupon_error:
            body["couponError"] = self.coupon_error
        return body


@dataclass
class ProcessPaymentRequest:
    """Request to verify a completed provider payment"""

    user_id: str
    amount: Any
    items: List[CartItemInput] = field(default_factory=list)
    user_email: Optional[str] = None
    subtotal: Any = None
    coupon_code: Optional[str] = None
    delivery_zone: Optional[str] = None
    total_weight: Any = 0
    transaction_id: Optional[str] = None
    tranzila_response: Optional[Dict[str, Any]] = None
    payment_method: Optional[str] = None
    currency: Optional[str] = None


@dataclass
class PaymentVerificationResponse:
    """Verified payment"""

    transaction_id: str
    amount: float
    expected_total: float
    currency: str
    request_id: str
    status: str = "completed"
    payment_gateway: str = "tranzila"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "transactionId": self.transaction_id,
            "amount": self.amount,
            "expectedTotal": self.expected_total,
            "currency": self.currency,
            "status": self.status,
            "paymentGateway": self.payment_gateway,
        }
