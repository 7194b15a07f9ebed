"""
Order Creation Use Case

Handles the business logic for creating an order after a verified payment.
"""

import logging

from src.application.dtos.order_dtos import CreateOrderRequest, OrderCreationResponse
from src.application.services.cart_pricing_service import CartPricingService, PricedCart
from src.domain.entities.order_entity import Order, OrderItem
from src.domain.repositories.coupon_repository import CouponRepository
from src.domain.repositories.order_repository import OrderRepository
from src.domain.value_objects.delivery_address import DeliveryAddress
from src.domain.value_objects.money import round_currency
from src.domain.value_objects.multilingual_text import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, resolve
from src.infrastructure.logging.logging_config import security_logger
from src.infrastructure.utilities.constants import DeliveryTypes
from src.infrastructure.utilities.exceptions import AmountMismatchError, ValidationError
from src.infrastructure.utilities.helpers import sanitize_text


class OrderCreationUseCase:
    """Use case for creating orders once payment has been verified"""

    def __init__(
        self,
        pricing_service: CartPricingService,
        order_repository: OrderRepository,
        coupon_repository: CouponRepository,
    ):
        self._pricing_service = pricing_service
        self._order_repository = order_repository
        self._coupon_repository = coupon_repository
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(self, request: CreateOrderRequest) -> OrderCreationResponse:
        """Re-price the cart, persist the order and consume the coupon"""
        self._logger.info("📝 ===== ORDER CREATION STARTED =====")
        self._logger.info(
            "📝 ORDER CREATION: user=%s items=%d transaction=%s",
            request.user_id, len(request.items), request.transaction_id,
        )

        if not request.items:
            raise ValidationError("Order must contain at least one item", field="items")

        shipping_address = self._validate_shipping_address(request)
        language = request.language if request.language in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE

        priced = await self._pricing_service.price_cart(
            request.items,
            request.user_id,
            coupon_code=request.coupon_code,
            delivery_zone=request.delivery_zone if request.delivery_type == DeliveryTypes.DELIVERY else None,
            total_weight=request.total_weight,
        )
        self._verify_total(request, priced)

        order = Order(
            id=None,
            user_id=request.user_id,
            user_email=request.user_email,
            items=[
                OrderItem(
                    name=resolve(line.name, language) or line.item.label,
                    price=line.unit_price,
                    quantity=line.quantity,
                    product_id=line.item.product_id,
                    options=line.item.options,
                )
                for line in priced.lines
            ],
            totals=priced.totals,
            coupon_code=priced.coupon_code if priced.coupon_error is None else None,
            transaction_id=request.transaction_id,
            payment_method=request.payment_method,
            delivery_type=request.delivery_type,
            delivery_zone=request.delivery_zone,
            shipping_address=shipping_address.to_dict() if shipping_address else None,
            phone=sanitize_text(request.phone, 30) or None,
            notes=sanitize_text(request.notes) or None,
            language=language,
        )
        saved = await self._order_repository.create_order(order)

        if order.coupon_code:
            await self._coupon_repository.mark_used(order.coupon_code, request.user_id)

        self._logger.info("🎉 ===== ORDER CREATION COMPLETED: #%s =====", saved.id)
        return OrderCreationResponse(order_id=saved.id, total=float(saved.totals.total))

    @staticmethod
    def _validate_shipping_address(request: CreateOrderRequest) -> DeliveryAddress | None:
        if request.delivery_type != DeliveryTypes.DELIVERY:
            return None
        try:
            return DeliveryAddress.from_dict(request.shipping_address)
        except ValueError as e:
            raise ValidationError(str(e), field="shippingAddress") from e

    def _verify_total(self, request: CreateOrderRequest, priced: PricedCart):
        """The client total must equal the server recomputation exactly"""
        expected = priced.totals.total
        if self._pricing_service.policy.amounts_match(expected, request.total):
            return

        try:
            client_total = float(round_currency(request.total))
        except ValueError:
            client_total = None
        security_logger.log_amount_mismatch(
            request.user_id,
            request.total,
            expected,
            context={"transaction_id": request.transaction_id, "stage": "order_creation"},
        )
        raise AmountMismatchError(float(expected), client_total)
