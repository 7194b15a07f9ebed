"""
Checkout gateway

The four backend calls the checkout state machine needs. Two
implementations exist: StorefrontApiClient talks HTTP+JSON to a running
backend, InProcessCheckoutGateway calls the use cases directly.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from src.application.checkout.cart_state import CartSnapshot
from src.application.dtos.order_dtos import CreateOrderRequest, FailedOrderRequest
from src.application.dtos.payment_dtos import CalculateTotalRequest, CartItemInput, ProcessPaymentRequest
from src.application.use_cases.failed_order_use_case import FailedOrderUseCase
from src.application.use_cases.order_creation_use_case import OrderCreationUseCase
from src.application.use_cases.payment_verification_use_case import PaymentVerificationUseCase
from src.application.use_cases.total_calculation_use_case import TotalCalculationUseCase
from src.domain.entities.order_total import OrderTotal
from src.infrastructure.utilities.exceptions import OrderCreationError, StorefrontError


@dataclass(frozen=True)
class CheckoutCustomer:
    """Who is checking out"""

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class OrderDetails:
    """Fulfilment fields sent with order creation"""

    shipping_address: Optional[Dict[str, Any]] = None
    phone: Optional[str] = None
    notes: Optional[str] = None
    language: str = "en"
    payment_method: str = "credit_card"
    extra_metadata: Dict[str, Any] = field(default_factory=dict)

    def metadata_for(self, cart: CartSnapshot) -> Dict[str, Any]:
        return {
            **self.extra_metadata,
            "deliveryType": cart.delivery_type,
            "deliveryZone": cart.delivery_zone,
            "totalWeight": cart.total_weight,
            "paymentMethod": self.payment_method,
        }


@dataclass(frozen=True)
class Quote:
    """Server price for a cart snapshot"""

    totals: OrderTotal
    coupon_error: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return self.totals.total


@dataclass(frozen=True)
class VerifiedPayment:
    """Payment the backend accepted"""

    transaction_id: str
    amount: Decimal
    expected_total: Decimal


@runtime_checkable
class CheckoutGateway(Protocol):
    """Backend operations used during checkout"""

    async def calculate_total(self, cart: CartSnapshot) -> Quote:
        ...

    async def process_payment(
        self,
        cart: CartSnapshot,
        amount: Decimal,
        transaction_id: Optional[str],
        provider_response: Optional[Dict[str, Any]] = None,
    ) -> VerifiedPayment:
        ...

    async def create_order(
        self, cart: CartSnapshot, total: Decimal, transaction_id: str, details: OrderDetails
    ) -> int:
        ...

    async def log_failed_order(
        self,
        transaction_id: Optional[str],
        order_data: Dict[str, Any],
        error: str,
        error_details: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        ...


def _items(cart: CartSnapshot) -> list[CartItemInput]:
    return [CartItemInput.from_dict(item) for item in cart.items]


class InProcessCheckoutGateway:
    """CheckoutGateway that calls the use cases without a network hop"""

    def __init__(
        self,
        customer: CheckoutCustomer,
        total_use_case: TotalCalculationUseCase,
        payment_use_case: PaymentVerificationUseCase,
        order_use_case: OrderCreationUseCase,
        failed_order_use_case: FailedOrderUseCase,
    ):
        self._customer = customer
        self._total_use_case = total_use_case
        self._payment_use_case = payment_use_case
        self._order_use_case = order_use_case
        self._failed_order_use_case = failed_order_use_case

    async def calculate_total(self, cart: CartSnapshot) -> Quote:
        response = await self._total_use_case.execute(
            CalculateTotalRequest(
                user_id=self._customer.user_id,
                items=_items(cart),
                coupon_code=cart.coupon_code,
                delivery_zone=cart.delivery_zone,
                total_weight=cart.total_weight,
            )
        )
        return Quote(totals=response.totals, coupon_error=response.coupon_error)

    async def process_payment(
        self,
        cart: CartSnapshot,
        amount: Decimal,
        transaction_id: Optional[str],
        provider_response: Optional[Dict[str, Any]] = None,
    ) -> VerifiedPayment:
        response = await self._payment_use_case.execute(
            ProcessPaymentRequest(
                user_id=self._customer.user_id,
                user_email=self._customer.email,
                amount=amount,
                items=_items(cart),
                coupon_code=cart.coupon_code,
                delivery_zone=cart.delivery_zone,
                total_weight=cart.total_weight,
                transaction_id=transaction_id,
                tranzila_response=provider_response,
                payment_method="credit_card",
            )
        )
        return VerifiedPayment(
            transaction_id=response.transaction_id,
            amount=Decimal(str(response.amount)),
            expected_total=Decimal(str(response.expected_total)),
        )

    async def create_order(
        self, cart: CartSnapshot, total: Decimal, transaction_id: str, details: OrderDetails
    ) -> int:
        request = CreateOrderRequest(
            user_id=self._customer.user_id,
            user_email=self._customer.email,
            items=_items(cart),
            total=total,
            coupon_code=cart.coupon_code,
            transaction_id=transaction_id,
            shipping_address=details.shipping_address,
            phone=details.phone or self._customer.phone,
            notes=details.notes,
            language=details.language,
            metadata=details.metadata_for(cart),
        )
        try:
            response = await self._order_use_case.create_order(request)
        except StorefrontError as e:
            # Any refusal after a verified payment is an order-creation failure
            raise OrderCreationError(e.user_message, e.status_code, e.to_dict()) from e
        return response.order_id

    async def log_failed_order(
        self,
        transaction_id: Optional[str],
        order_data: Dict[str, Any],
        error: str,
        error_details: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        record = await self._failed_order_use_case.record(
            FailedOrderRequest(
                order_data=order_data,
                error=error,
                transaction_id=transaction_id,
                error_details=error_details or {},
                user_id=self._customer.user_id,
                user_email=self._customer.email,
                user_name=self._customer.name,
            )
        )
        return record.id
