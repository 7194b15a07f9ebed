"""
Cart Pricing Service

Recomputes a cart's price from stored product data. Shared by the
calculate-total, payment verification and order creation use cases so
all three agree on the same number.
"""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from src.application.dtos.payment_dtos import CartItemInput
from src.domain.entities.order_total import OrderTotal
from src.domain.repositories.coupon_repository import CouponRepository
from src.domain.repositories.customer_repository import CustomerRepository
from src.domain.repositories.product_repository import ProductRepository
from src.domain.services.pricing import PricingPolicy
from src.domain.value_objects.coupon_code import CouponCode
from src.domain.value_objects.money import round_currency
from src.infrastructure.logging.logging_config import security_logger
from src.infrastructure.utilities.exceptions import ProductNotFoundError, ValidationError


@dataclass
class PricedLine:
    """Cart line with the price the server charges for it"""

    item: CartItemInput
    unit_price: Decimal
    quantity: int
    name: Any = None


@dataclass
class PricedCart:
    """Result of pricing a cart"""

    totals: OrderTotal
    lines: List[PricedLine]
    coupon_code: Optional[str] = None
    coupon_error: Optional[str] = None


def _parse_quantity(item: CartItemInput) -> int:
    """Missing or non-numeric quantities count as 1; zero, negative and fractional ones are rejected"""
    raw = item.quantity
    if raw is None or isinstance(raw, bool):
        return 1
    try:
        quantity = Decimal(str(raw))
    except InvalidOperation:
        return 1
    if quantity.is_nan():
        return 1
    if not quantity.is_finite() or quantity <= 0 or quantity != quantity.to_integral_value():
        raise ValidationError(
            "Invalid item quantity",
            field="quantity",
            details=f"Item {item.label} has invalid quantity: {raw}",
        )
    return int(quantity)


def _parse_client_price(item: CartItemInput) -> Decimal:
    raw = item.price
    try:
        price = Decimal(str(raw)) if raw is not None and not isinstance(raw, bool) else Decimal("0")
    except InvalidOperation:
        price = Decimal("0")
    if price.is_nan():
        price = Decimal("0")
    if not price.is_finite() or price < 0:
        raise ValidationError(
            "Invalid item price",
            field="price",
            details=f"Item {item.label} has invalid price: {raw}",
        )
    return price


def _is_valid_client_subtotal(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return value >= 0


class CartPricingService:
    """Server-side pricing of carts against stored prices, coupons and account age"""

    def __init__(
        self,
        product_repository: ProductRepository,
        coupon_repository: CouponRepository,
        customer_repository: CustomerRepository,
        policy: PricingPolicy,
    ):
        self._product_repository = product_repository
        self._coupon_repository = coupon_repository
        self._customer_repository = customer_repository
        self._policy = policy
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def policy(self) -> PricingPolicy:
        return self._policy

    async def price_lines(self, items: List[CartItemInput]) -> List[PricedLine]:
        """Price every line from the database (sale price when on sale); custom lines use the client price"""
        product_ids = [item.product_id for item in items if item.product_id]
        products = await self._product_repository.find_by_ids(product_ids) if product_ids else {}

        lines = []
        for item in items:
            quantity = _parse_quantity(item)
            if item.is_custom:
                unit_price = _parse_client_price(item)
                name = item.name
            else:
                product = products.get(item.product_id)
                if product is None:
                    raise ProductNotFoundError(item.product_id)
                unit_price = product.effective_price
                name = product.name
            lines.append(PricedLine(item=item, unit_price=unit_price, quantity=quantity, name=name))
        return lines

    async def compute_subtotal(
        self,
        items: List[CartItemInput],
        client_subtotal: Any = None,
        user_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> tuple[Decimal, List[PricedLine]]:
        """Subtotal from items, or from the client subtotal when no items were sent"""
        if items:
            lines = await self.price_lines(items)
            subtotal = sum((line.unit_price * line.quantity for line in lines), Decimal("0"))
            return round_currency(subtotal), lines

        if _is_valid_client_subtotal(client_subtotal):
            security_logger.log_client_subtotal_used(user_id, request_id)
            return round_currency(client_subtotal), []

        raise ValidationError("Invalid input: must provide either items array or valid subtotal")

    async def resolve_coupon(self, code: CouponCode, user_id: Optional[str]) -> tuple[Optional[Decimal], Optional[str]]:
        """(percentage, None) for a usable coupon, (None, reason) otherwise"""
        coupon = await self._coupon_repository.find_by_code(code.value)
        if coupon is None:
            return None, "Invalid coupon code"

        reason = coupon.rejection_reason()
        if reason:
            return None, reason

        self._logger.info("🎟️ COUPON %s accepted for %s (%s%%)", code, user_id, coupon.discount_percentage)
        return coupon.discount_percentage, None

    async def is_new_user(self, user_id: Optional[str], now: Optional[datetime] = None) -> bool:
        """Whether the account still qualifies for the new-user discount"""
        if not user_id:
            return False
        customer = await self._customer_repository.find_by_uid(user_id)
        if customer is None:
            self._logger.info("No customer record for %s, new-user discount not applied", user_id)
            return False
        return customer.is_new_user(self._policy.new_user_discount_months, now or datetime.now(UTC))

    async def price_cart(
        self,
        items: List[CartItemInput],
        user_id: Optional[str],
        coupon_code: Any = None,
        delivery_zone: Optional[str] = None,
        total_weight: Any = 0,
        client_subtotal: Any = None,
        request_id: Optional[str] = None,
    ) -> PricedCart:
        """Full server-side price of a cart"""
        subtotal, lines = await self.compute_subtotal(items, client_subtotal, user_id, request_id)

        code = CouponCode.parse(coupon_code)
        coupon_percentage: Optional[Decimal] = None
        coupon_error: Optional[str] = None
        is_new_user = False
        if code is not None:
            coupon_percentage, coupon_error = await self.resolve_coupon(code, user_id)
            if coupon_error:
                self._logger.info("🎟️ COUPON %s rejected for %s: %s", code, user_id, coupon_error)
        else:
            is_new_user = await self.is_new_user(user_id)

        totals = self._policy.calculate_total(
            subtotal,
            coupon_percentage=coupon_percentage,
            coupon_present=code is not None,
            is_new_user=is_new_user,
            delivery_zone=delivery_zone,
            total_weight=total_weight,
        )
        return PricedCart(
            totals=totals,
            lines=lines,
            coupon_code=code.value if code else None,
            coupon_error=coupon_error,
        )
