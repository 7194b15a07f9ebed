"""
Order DTOs

Data Transfer Objects for order creation and the failed-order audit log.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.application.dtos.payment_dtos import CartItemInput
from src.infrastructure.utilities.constants import DeliveryTypes


@dataclass
class CreateOrderRequest:
    """Request to create an order after a verified payment"""

    user_id: str
    items: List[CartItemInput]
    total: Any
    user_email: Optional[str] = None
    coupon_code: Optional[str] = None
    transaction_id: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    language: str = "en"
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def delivery_type(self) -> str:
        return self.metadata.get("deliveryType") or DeliveryTypes.PICKUP

    @property
    def delivery_zone(self) -> Optional[str]:
        return self.metadata.get("deliveryZone")

    @property
    def total_weight(self) -> Any:
        return self.metadata.get("totalWeight", 0)

    @property
    def payment_method(self) -> Optional[str]:
        return self.metadata.get("paymentMethod")


@dataclass
class OrderCreationResponse:
    """Created order"""

    order_id: int
    total: float
    message: str = "Order created successfully"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.order_id, "message": self.message, "total": self.total}


@dataclass
class FailedOrderRequest:
    """Audit record submitted after a checkout ended abnormally"""

    order_data: Dict[str, Any]
    error: str
    transaction_id: Optional[str] = None
    error_details: Dict[str, Any] = field(default_factory=dict)
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None


@dataclass
class FailedOrderUpdateRequest:
    """Reviewer change to an audit record"""

    failed_order_id: int
    status: Optional[str] = None
    comment: Optional[str] = None
