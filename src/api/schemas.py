"""
Request bodies of the storefront HTTP API

Field names follow the storefront's camelCase JSON. Numeric fields are
left loosely typed; the use cases decide what counts as a valid amount or quantity.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.application.dtos.order_dtos import CreateOrderRequest, FailedOrderRequest
from src.application.dtos.payment_dtos import CalculateTotalRequest, CartItemInput, ProcessPaymentRequest


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _items(raw: Optional[List[Dict[str, Any]]]) -> List[CartItemInput]:
    return [CartItemInput.from_dict(item) for item in raw or []]


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


class CalculateTotalBody(CamelModel):
    items: Optional[List[Dict[str, Any]]] = None
    subtotal: Any = None
    coupon_code: Any = Field(default=None, alias="couponCode")
    delivery_zone: Optional[str] = Field(default=None, alias="deliveryZone")
    total_weight: Any = Field(default=0, alias="totalWeight")
    delivery_cost: Any = Field(default=None, alias="deliveryCost")

    def to_request(self, user_id: str) -> CalculateTotalRequest:
        return CalculateTotalRequest(
            user_id=user_id,
            items=_items(self.items),
            subtotal=self.subtotal,
            coupon_code=self.coupon_code,
            delivery_zone=self.delivery_zone,
            total_weight=self.total_weight,
            client_delivery_cost=self.delivery_cost,
        )


class ProcessPaymentBody(CamelModel):
    amount: Any = None
    items: Optional[List[Dict[str, Any]]] = None
    subtotal: Any = None
    coupon_code: Any = Field(default=None, alias="couponCode")
    delivery_zone: Optional[str] = Field(default=None, alias="deliveryZone")
    total_weight: Any = Field(default=0, alias="totalWeight")
    transaction_id: Any = Field(default=None, alias="transactionId")
    tranzila_response: Optional[Dict[str, Any]] = Field(default=None, alias="tranzilaResponse")
    payment_method: Optional[str] = Field(default=None, alias="paymentMethod")
    currency: Optional[str] = None

    def to_request(self, user_id: str, user_email: Optional[str]) -> ProcessPaymentRequest:
        return ProcessPaymentRequest(
            user_id=user_id,
            user_email=user_email,
            amount=self.amount,
            items=_items(self.items),
            subtotal=self.subtotal,
            coupon_code=self.coupon_code,
            delivery_zone=self.delivery_zone,
            total_weight=self.total_weight,
            transaction_id=_optional_str(self.transaction_id),
            tranzila_response=self.tranzila_response,
            payment_method=self.payment_method,
            currency=self.currency,
        )


class CreateOrderBody(CamelModel):
    items: Optional[List[Dict[str, Any]]] = None
    total: Any = None
    coupon_code: Any = Field(default=None, alias="couponCode")
    transaction_id: Any = Field(default=None, alias="transactionId")
    shipping_address: Optional[Dict[str, Any]] = Field(default=None, alias="shippingAddress")
    phone: Optional[str] = None
    notes: Optional[str] = None
    language: str = "en"
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_request(self, user_id: str, user_email: Optional[str]) -> CreateOrderRequest:
        return CreateOrderRequest(
            user_id=user_id,
            user_email=user_email,
            items=_items(self.items),
            total=self.total,
            coupon_code=self.coupon_code,
            transaction_id=_optional_str(self.transaction_id),
            shipping_address=self.shipping_address,
            phone=self.phone,
            notes=self.notes,
            language=self.language,
            metadata=self.metadata,
        )


class FailedOrderBody(CamelModel):
    transaction_id: Any = Field(default=None, alias="transactionId")
    order_data: Any = Field(default=None, alias="orderData")
    error: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = Field(default=None, alias="errorDetails")

    def to_request(self, user_id: str, user_email: Optional[str], user_name: Optional[str]) -> FailedOrderRequest:
        return FailedOrderRequest(
            order_data=self.order_data,
            error=self.error,
            transaction_id=_optional_str(self.transaction_id),
            error_details=self.error_details or {},
            user_id=user_id,
            user_email=user_email,
            user_name=user_name,
        )


class FailedOrderUpdateBody(CamelModel):
    status: Optional[str] = None
    comment: Optional[str] = None
