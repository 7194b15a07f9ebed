"""
HTTP client for the storefront backend

CheckoutGateway implementation used by the client-side checkout. Transport
failures and bodies that are not JSON are turned into the checkout error
taxonomy so the state machine can audit them.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

import httpx

from src.application.checkout.cart_state import CartSnapshot
from src.application.checkout.gateway import CheckoutCustomer, OrderDetails, Quote, VerifiedPayment
from src.domain.entities.order_total import OrderTotal
from src.infrastructure.utilities.constants import ErrorCodes
from src.infrastructure.utilities.exceptions import (
    AmountMismatchError,
    CheckoutError,
    NetworkFailureError,
    OrderCreationError,
    ResponseParseError,
    TransactionMissingError,
)

logger = logging.getLogger(__name__)

CALCULATE_TOTAL_PATH = "/api/payment/calculate-total"
PROCESS_PAYMENT_PATH = "/api/payment/process"
CREATE_ORDER_PATH = "/api/orders/create"
FAILED_ORDERS_PATH = "/api/orders/failed"


def _generic_error(status: int, body: Dict[str, Any]) -> CheckoutError:
    message = body.get("details") or body.get("error") or f"Request failed with status {status}"
    return CheckoutError(
        str(message),
        body.get("error"),
        body.get("code") or ErrorCodes.GENERAL_ERROR,
        details={"status": status},
    )


class StorefrontApiClient:
    """Async HTTP+JSON CheckoutGateway"""

    def __init__(
        self,
        base_url: str,
        customer: CheckoutCustomer,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._customer = customer
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        if client is not None and not str(client.base_url):
            self._client.base_url = base_url

    async def __aenter__(self) -> "StorefrontApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        headers = {"X-User-Id": self._customer.user_id}
        if self._customer.email:
            headers["X-User-Email"] = self._customer.email
        return headers

    async def _post(self, path: str, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        """POST JSON and return (status, body); transport and parse failures raise"""
        try:
            response = await self._client.post(path, json=payload, headers=self._headers())
        except httpx.TransportError as e:
            logger.error("🌐 NETWORK ERROR on %s: %s", path, e)
            raise NetworkFailureError(f"Network request to {path} failed: {e}", type(e).__name__) from e

        try:
            body = response.json()
        except ValueError as e:
            logger.error("💥 INVALID JSON from %s (status %s): %s", path, response.status_code, e)
            raise ResponseParseError(str(e), response.status_code, response.reason_phrase) from e

        if not isinstance(body, dict):
            raise ResponseParseError(
                f"Expected a JSON object, got {type(body).__name__}",
                response.status_code,
                response.reason_phrase,
            )
        return response.status_code, body

    async def calculate_total(self, cart: CartSnapshot) -> Quote:
        status, body = await self._post(CALCULATE_TOTAL_PATH, cart.to_payload())
        if not 200 <= status < 300:
            raise _generic_error(status, body)
        try:
            totals = OrderTotal.from_dict(body)
        except (KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise ResponseParseError(f"Malformed total breakdown: {e}", status) from e
        return Quote(totals=totals, coupon_error=body.get("couponError"))

    async def process_payment(
        self,
        cart: CartSnapshot,
        amount: Decimal,
        transaction_id: Optional[str],
        provider_response: Optional[Dict[str, Any]] = None,
    ) -> VerifiedPayment:
        payload = {
            **cart.to_payload(),
            "amount": float(amount),
            "transactionId": transaction_id,
            "tranzilaResponse": provider_response,
            "paymentMethod": "credit_card",
        }
        status, body = await self._post(PROCESS_PAYMENT_PATH, payload)
        if not 200 <= status < 300:
            code = body.get("code")
            if code == ErrorCodes.AMOUNT_MISMATCH:
                raise AmountMismatchError(body.get("expectedTotal"), body.get("clientAmount"))
            if code == ErrorCodes.TRANSACTION_MISSING:
                raise TransactionMissingError()
            raise _generic_error(status, body)

        try:
            return VerifiedPayment(
                transaction_id=str(body["transactionId"]),
                amount=Decimal(str(body["amount"])),
                expected_total=Decimal(str(body["expectedTotal"])),
            )
        except (KeyError, ArithmeticError) as e:
            raise ResponseParseError(f"Malformed payment response: {e}", status) from e

    async def create_order(
        self, cart: CartSnapshot, total: Decimal, transaction_id: str, details: OrderDetails
    ) -> int:
        payload = {
            **cart.to_payload(),
            "total": float(total),
            "transactionId": transaction_id,
            "shippingAddress": details.shipping_address,
            "phone": details.phone or self._customer.phone,
            "notes": details.notes,
            "language": details.language,
            "metadata": details.metadata_for(cart),
        }
        status, body = await self._post(CREATE_ORDER_PATH, payload)
        if not 200 <= status < 300:
            raise OrderCreationError(body.get("error"), status, body)
        if "id" not in body:
            raise ResponseParseError("Order response has no id", status)
        return body["id"]

    async def log_failed_order(
        self,
        transaction_id: Optional[str],
        order_data: Dict[str, Any],
        error: str,
        error_details: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        payload = {
            "transactionId": transaction_id,
            "orderData": order_data,
            "error": error,
            "errorDetails": error_details or {},
        }
        status, body = await self._post(FAILED_ORDERS_PATH, payload)
        if not 200 <= status < 300:
            raise _generic_error(status, body)
        return body.get("id")
