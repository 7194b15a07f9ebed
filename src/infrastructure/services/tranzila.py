"""
Tranzila hosted payment page integration

Builds the iframe URL for a validated total and normalizes the events the
hosted page reports back (window messages and success/failure redirects)
into PaymentSignal objects.
"""

import json
import logging
from decimal import Decimal
from typing import Any, Mapping, Optional

import httpx

from src.domain.value_objects.money import round_currency
from src.domain.value_objects.payment_signal import PaymentSignal, PaymentSignalKind
from src.infrastructure.utilities.constants import PaymentSettings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://directng.tranzila.com"
SUCCESS_PATH = "/payment/success"
FAILURE_PATH = "/payment/failed"

# Field names the provider uses for its transaction reference, in lookup order
TRANSACTION_ID_FIELDS = ("transactionId", "TransactionId", "RefNo", "TranzilaTK")


def build_iframe_url(
    terminal: str,
    amount: Any,
    origin: str,
    currency: str = PaymentSettings.DEFAULT_CURRENCY,
    customer_email: Optional[str] = None,
    customer_phone: Optional[str] = None,
    customer_name: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """
    URL of the hosted payment page for `amount`.

    The amount is sent in currency units with two decimals (24.66, not
    agorot). Success redirects to <origin>/payment/success, errors and
    cancellations to <origin>/payment/failed.
    """
    if not terminal:
        raise ValueError("Tranzila terminal name is required")

    origin = origin.rstrip("/")
    params = [
        ("sum", f"{round_currency(amount):.2f}"),
        ("currency", currency or PaymentSettings.DEFAULT_CURRENCY),
        ("success_url", f"{origin}{SUCCESS_PATH}"),
        ("error_url", f"{origin}{FAILURE_PATH}"),
        ("cancel_url", f"{origin}{FAILURE_PATH}"),
    ]
    if customer_email:
        params.append(("email", customer_email))
    if customer_phone:
        params.append(("phone", customer_phone))
    if customer_name:
        params.append(("contact", customer_name))

    url = httpx.URL(f"{base_url.rstrip('/')}/{terminal}/iframenew.php", params=params)
    return str(url)


def extract_transaction_id(*sources: Optional[Mapping[str, Any]]) -> Optional[str]:
    """First non-blank transaction reference found in the given payloads"""
    for source in sources:
        if not isinstance(source, Mapping):
            continue
        for key in TRANSACTION_ID_FIELDS:
            value = source.get(key)
            if value is not None and str(value).strip():
                return str(value).strip()
    return None


def _parse_amount(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except ArithmeticError:
        return None
    return float(amount) if amount.is_finite() else None


def _error_message(data: Mapping[str, Any]) -> Optional[str]:
    return data.get("message") or data.get("ErrorMessage") or data.get("error")


def _is_success(data: Mapping[str, Any]) -> bool:
    return (
        data.get("type") == "payment_success"
        or data.get("status") == "success"
        or str(data.get("Response", "")) == PaymentSettings.APPROVED_RESPONSE_CODE
    )


def parse_payment_message(data: Any) -> PaymentSignal:
    """
    Normalize a window message posted by the payment iframe.

    Accepts a dict or a JSON string. Anything that is neither a success,
    a cancellation nor a load notification is a failure.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except ValueError as e:
            logger.warning("Unparseable payment message: %s", e)
            return PaymentSignal(PaymentSignalKind.FAILED, message=f"Unparseable payment message: {e}")

    if not isinstance(data, Mapping):
        return PaymentSignal(PaymentSignalKind.FAILED, message="Unexpected payment message format")

    raw = dict(data)
    transaction_id = extract_transaction_id(raw)
    amount = _parse_amount(raw.get("amount", raw.get("sum")))

    if _is_success(raw):
        kind = PaymentSignalKind.SUCCESS
    elif raw.get("type") == "payment_cancelled" or raw.get("status") == "cancelled":
        kind = PaymentSignalKind.CANCELLED
    elif raw.get("type") == "iframe_loaded":
        kind = PaymentSignalKind.LOADED
    else:
        kind = PaymentSignalKind.FAILED

    message = _error_message(raw)
    if kind is PaymentSignalKind.FAILED and not message:
        message = "Payment failed"

    return PaymentSignal(kind, transaction_id=transaction_id, amount=amount, message=message, raw=raw)


def parse_redirect_params(params: Mapping[str, Any], path: str = SUCCESS_PATH) -> PaymentSignal:
    """
    Normalize the query string of a success/failure redirect.

    A redirect to the failure page is a failure whatever its parameters
    say; on the success page an explicit non-approved Response code still
    counts as a failure.
    """
    raw = {key: value for key, value in params.items()}
    transaction_id = extract_transaction_id(raw)
    amount = _parse_amount(raw.get("amount", raw.get("sum")))
    message = _error_message(raw)

    response_code = raw.get("Response")
    approved = response_code is None or str(response_code) == PaymentSettings.APPROVED_RESPONSE_CODE

    if path.rstrip("/").endswith(SUCCESS_PATH) and approved:
        return PaymentSignal(PaymentSignalKind.SUCCESS, transaction_id=transaction_id, amount=amount, raw=raw)

    return PaymentSignal(
        PaymentSignalKind.FAILED,
        transaction_id=transaction_id,
        amount=amount,
        message=message or "Payment failed",
        raw=raw,
    )
