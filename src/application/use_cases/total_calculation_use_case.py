"""
Total Calculation Use Case

Prices a cart server-side. Pure and idempotent: nothing is reserved and
no coupon use is consumed.
"""

import logging
import math
from decimal import Decimal

from src.application.dtos.payment_dtos import CalculateTotalRequest, TotalCalculationResponse
from src.application.services.cart_pricing_service import CartPricingService
from src.infrastructure.logging.logging_config import PerformanceLogger, security_logger
from src.infrastructure.utilities.constants import PaymentSettings
from src.infrastructure.utilities.helpers import generate_request_id


class TotalCalculationUseCase:
    """Use case behind POST /api/payment/calculate-total"""

    def __init__(self, pricing_service: CartPricingService):
        self._pricing_service = pricing_service
        self._logger = logging.getLogger(self.__class__.__name__)

    async def execute(self, request: CalculateTotalRequest) -> TotalCalculationResponse:
        request_id = generate_request_id(PaymentSettings.CALCULATION_REQUEST_PREFIX)
        self._logger.info(
            "🧮 CALCULATE TOTAL: user=%s items=%d coupon=%s zone=%s",
            request.user_id, len(request.items), bool(request.coupon_code), request.delivery_zone,
            extra={"request_id": request_id, "user_id": request.user_id},
        )

        with PerformanceLogger("calculate_total", self._logger, {"request_id": request_id}):
            priced = await self._pricing_service.price_cart(
                request.items,
                request.user_id,
                coupon_code=request.coupon_code,
                delivery_zone=request.delivery_zone,
                total_weight=request.total_weight,
                client_subtotal=request.subtotal,
                request_id=request_id,
            )

        totals = priced.totals
        self._check_client_delivery_cost(request, totals.delivery_cost, request_id)

        self._logger.info(
            "✅ TOTAL CALCULATED: subtotal=%s discount=%s (%s) tax=%s delivery=%s total=%s",
            totals.subtotal_before_discount, totals.discount_amount, totals.discount_type.value,
            totals.tax, totals.delivery_cost, totals.total,
            extra={"request_id": request_id, "user_id": request.user_id},
        )
        return TotalCalculationResponse(
            totals=totals,
            request_id=request_id,
            coupon_code=priced.coupon_code,
            coupon_error=priced.coupon_error,
        )

    @staticmethod
    def _check_client_delivery_cost(request: CalculateTotalRequest, expected: Decimal, request_id: str):
        """The server value always wins; a differing client value is only logged"""
        client_cost = request.client_delivery_cost
        if client_cost is None or isinstance(client_cost, bool) or not isinstance(client_cost, (int, float)):
            return
        if not math.isfinite(client_cost) or client_cost < 0:
            return
        if abs(Decimal(str(client_cost)) - expected) >= Decimal("0.01"):
            security_logger.log_delivery_cost_mismatch(request.user_id, client_cost, expected, request_id)
