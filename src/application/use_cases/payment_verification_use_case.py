"""
Payment Verification Use Case

Checks a completed provider payment against the server-side total before
any order is written.
"""

import logging
import math
from decimal import Decimal

from src.application.dtos.payment_dtos import PaymentVerificationResponse, ProcessPaymentRequest
from src.application.services.cart_pricing_service import CartPricingService
from src.domain.value_objects.money import round_currency
from src.infrastructure.logging.logging_config import PerformanceLogger, security_logger
from src.infrastructure.services.tranzila import extract_transaction_id
from src.infrastructure.utilities.constants import PaymentSettings
from src.infrastructure.utilities.exceptions import (
    AmountMismatchError,
    InvalidAmountError,
    TransactionMissingError,
)
from src.infrastructure.utilities.helpers import generate_request_id


def _positive_amount(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return value > 0


class PaymentVerificationUseCase:
    """Use case behind POST /api/payment/process"""

    def __init__(self, pricing_service: CartPricingService, currency: str = PaymentSettings.DEFAULT_CURRENCY):
        self._pricing_service = pricing_service
        self._currency = currency
        self._logger = logging.getLogger(self.__class__.__name__)

    async def execute(self, request: ProcessPaymentRequest) -> PaymentVerificationResponse:
        request_id = generate_request_id(PaymentSettings.PAYMENT_REQUEST_PREFIX)
        log_extra = {"request_id": request_id, "user_id": request.user_id}
        self._logger.info(
            "💳 PAYMENT PROCESS: user=%s amount=%s method=%s",
            request.user_id, request.amount, request.payment_method or "not specified",
            extra=log_extra,
        )

        if not _positive_amount(request.amount):
            self._logger.error("💥 INVALID PAYMENT AMOUNT: %s", request.amount, extra=log_extra)
            raise InvalidAmountError("Invalid payment amount", request.amount)

        with PerformanceLogger("verify_payment", self._logger, {"request_id": request_id}):
            priced = await self._pricing_service.price_cart(
                request.items,
                request.user_id,
                coupon_code=request.coupon_code,
                delivery_zone=request.delivery_zone,
                total_weight=request.total_weight,
                client_subtotal=request.subtotal,
                request_id=request_id,
            )

        expected_total = priced.totals.total
        client_amount = round_currency(request.amount)
        if not self._pricing_service.policy.amounts_match(expected_total, client_amount):
            security_logger.log_amount_mismatch(
                request.user_id,
                client_amount,
                expected_total,
                context={
                    "request_id": request_id,
                    "coupon_code": priced.coupon_code,
                    "discount_type": priced.totals.discount_type.value,
                    "difference": str(abs(expected_total - client_amount)),
                },
            )
            raise AmountMismatchError(float(expected_total), float(client_amount))

        transaction_id = extract_transaction_id(
            {"transactionId": request.transaction_id}, request.tranzila_response
        )
        if not transaction_id:
            self._logger.error("💥 PAYMENT REJECTED: no transaction id", extra=log_extra)
            raise TransactionMissingError()

        self._logger.info(
            "✅ PAYMENT VERIFIED: transaction=%s amount=%s", transaction_id, client_amount, extra=log_extra
        )
        return PaymentVerificationResponse(
            transaction_id=transaction_id,
            amount=float(client_amount),
            expected_total=float(expected_total),
            currency=request.currency or self._currency,
            request_id=request_id,
        )
