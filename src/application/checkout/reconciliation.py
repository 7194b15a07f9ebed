"""
Payment total reconciliation

CheckoutSession drives one shopper's checkout through

    IDLE -> CALCULATING -> AWAITING_PAYMENT -> VERIFYING -> SETTLED | REJECTED

The amount shown in the payment window is fixed when the window opens.
When the provider reports success the live cart is priced again and the
charged amount must still match before the backend is asked to verify the
payment and write the order. Every rejection after a payment may have
been taken is written to the failed-order audit log.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from src.application.checkout.cart_state import CartSnapshot, CartState
from src.application.checkout.gateway import CheckoutCustomer, CheckoutGateway, OrderDetails, Quote
from src.application.checkout.states import CheckoutState, ensure_transition
from src.domain.entities.failed_order import synthesize_transaction_id
from src.domain.services.pricing import DEFAULT_POLICY, PricingPolicy
from src.domain.value_objects.payment_signal import PaymentSignal, PaymentSignalKind
from src.infrastructure.logging.logging_config import get_structured_logger
from src.infrastructure.services.tranzila import DEFAULT_BASE_URL, build_iframe_url
from src.infrastructure.utilities.constants import ErrorCodes, PaymentSettings
from src.infrastructure.utilities.exceptions import (
    AmountMismatchError,
    CheckoutError,
    InvalidAmountError,
    NetworkFailureError,
    ResponseParseError,
    StorefrontError,
    TransactionMissingError,
    UnexpectedPaymentError,
)

logger = get_structured_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    """What the storefront renders after a provider event"""

    state: CheckoutState
    order_id: Optional[int] = None
    error: Optional[str] = None
    transaction_id: Optional[str] = None
    failed_order_id: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.state is CheckoutState.SETTLED


def failure_reason_prefix(error: Exception) -> str:
    """Prefix of the synthesized transaction id for an audit record without a provider reference"""
    if isinstance(error, (AmountMismatchError, TransactionMissingError, UnexpectedPaymentError)):
        return PaymentSettings.VERIFY_FAIL_REASON
    if isinstance(error, NetworkFailureError):
        return PaymentSettings.NETWORK_ERROR_REASON
    if isinstance(error, ResponseParseError):
        return PaymentSettings.JSON_ERROR_REASON
    return PaymentSettings.UNKNOWN_REASON


class CheckoutSession:
    """Reconciliation state machine for one shopper"""

    def __init__(
        self,
        gateway: CheckoutGateway,
        cart: CartState,
        customer: CheckoutCustomer,
        policy: PricingPolicy = DEFAULT_POLICY,
        terminal: str = "terminalname",
        currency: str = PaymentSettings.DEFAULT_CURRENCY,
        provider_base_url: str = DEFAULT_BASE_URL,
    ):
        self._gateway = gateway
        self._cart = cart
        self._customer = customer
        self._policy = policy
        self._terminal = terminal
        self._currency = currency
        self._provider_base_url = provider_base_url
        self._state = CheckoutState.IDLE
        self._quote: Optional[Quote] = None
        self._opened_snapshot: Optional[CartSnapshot] = None
        self._settled: Optional[CheckoutResult] = None

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def opened_amount(self) -> Optional[Decimal]:
        """Total the payment window was opened for"""
        return self._quote.total if self._quote else None

    @property
    def quote(self) -> Optional[Quote]:
        return self._quote

    def _move(self, target: CheckoutState):
        previous = self._state
        self._state = ensure_transition(self._state, target)
        logger.debug("checkout_transition", user_id=self._customer.user_id, previous=previous.value, state=target.value)

    def reset(self):
        """Abandon the current attempt"""
        if self._state is not CheckoutState.IDLE:
            self._move(CheckoutState.IDLE)
        self._quote = None
        self._opened_snapshot = None
        self._settled = None

    async def calculate(self) -> Quote:
        """
        Price the cart and, when the total is chargeable, wait for payment.

        An invalid total returns the session to IDLE and raises
        InvalidAmountError; it never reaches the provider.
        """
        self._move(CheckoutState.CALCULATING)
        self._quote = None
        snapshot = self._cart.snapshot()
        try:
            quote = await self._gateway.calculate_total(snapshot)
        except StorefrontError:
            self._move(CheckoutState.IDLE)
            raise

        validation = self._policy.validate_amount(quote.total)
        if not validation.valid:
            self._move(CheckoutState.IDLE)
            logger.warning("checkout_invalid_total", user_id=self._customer.user_id, total=str(quote.total), reason=validation.reason)
            raise InvalidAmountError(validation.reason, quote.total)

        self._quote = quote
        self._opened_snapshot = snapshot
        self._move(CheckoutState.AWAITING_PAYMENT)
        logger.info("checkout_awaiting_payment", user_id=self._customer.user_id, total=str(quote.total))
        return quote

    def payment_channel(self, origin: str) -> str:
        """Hosted payment page URL for the validated total"""
        if self._state is not CheckoutState.AWAITING_PAYMENT or self._quote is None:
            raise StorefrontError(
                f"Payment channel requested in state {self._state.value}",
                error_code=ErrorCodes.STATE_ERROR,
            )
        return build_iframe_url(
            self._terminal,
            self._quote.total,
            origin,
            currency=self._currency,
            customer_email=self._customer.email,
            customer_phone=self._customer.phone,
            customer_name=self._customer.name,
            base_url=self._provider_base_url,
        )

    async def handle_payment_signal(self, signal: PaymentSignal, details: Optional[OrderDetails] = None) -> CheckoutResult:
        """React to an event from the payment provider"""
        if signal.kind is PaymentSignalKind.LOADED:
            return CheckoutResult(state=self._state)

        if signal.kind in (PaymentSignalKind.CANCELLED, PaymentSignalKind.FAILED):
            if self._state is CheckoutState.VERIFYING:
                # The verification in flight decides the outcome
                return CheckoutResult(state=self._state, error=signal.message, transaction_id=signal.transaction_id)
            if self._state is not CheckoutState.IDLE:
                self._move(CheckoutState.IDLE)
            self._quote = None
            logger.info("checkout_abandoned", user_id=self._customer.user_id, kind=signal.kind.value, message=signal.message)
            return CheckoutResult(state=self._state, error=signal.message, transaction_id=signal.transaction_id)

        if self._state is not CheckoutState.AWAITING_PAYMENT:
            return await self._unexpected_success(signal)

        self._move(CheckoutState.VERIFYING)
        try:
            return await self._settle(signal, details or OrderDetails())
        except CheckoutError as error:
            return await self._reject(signal, error)
        except StorefrontError as error:
            return await self._reject(signal, CheckoutError(str(error), error.user_message, error.error_code))

    async def _settle(self, signal: PaymentSignal, details: OrderDetails) -> CheckoutResult:
        opened_amount = self.opened_amount
        live = self._cart.snapshot()

        requote = await self._gateway.calculate_total(live)
        if not self._policy.amounts_match(requote.total, opened_amount):
            raise AmountMismatchError(float(requote.total), float(opened_amount))

        payment = await self._gateway.process_payment(live, opened_amount, signal.transaction_id, signal.raw or None)
        order_id = await self._gateway.create_order(live, payment.expected_total, payment.transaction_id, details)

        self._move(CheckoutState.SETTLED)
        self._cart.clear()
        self._settled = CheckoutResult(state=CheckoutState.SETTLED, order_id=order_id, transaction_id=payment.transaction_id)
        logger.info(
            "checkout_settled",
            user_id=self._customer.user_id,
            order_id=order_id,
            transaction_id=payment.transaction_id,
            total=str(payment.expected_total),
        )
        return self._settled

    async def _unexpected_success(self, signal: PaymentSignal) -> CheckoutResult:
        """
        Success for a payment this session has no open window for.

        A repeated redirect for the order just settled is answered with that
        order. Anything else may be a charge with no order behind it, so it is
        audited and the session stays where it is.
        """
        settled = self._settled
        if settled is not None and signal.transaction_id and signal.transaction_id == settled.transaction_id:
            return settled

        error = UnexpectedPaymentError(self._state.value)
        transaction_id = signal.transaction_id or synthesize_transaction_id(failure_reason_prefix(error))
        logger.error(
            "unexpected_payment_success",
            user_id=self._customer.user_id,
            transaction_id=transaction_id,
            state=self._state.value,
        )
        failed_order_id = await self._record_failure(transaction_id, error)
        return CheckoutResult(
            state=self._state,
            error=ErrorCodes.PAYMENT_FAILURE_MESSAGE,
            transaction_id=transaction_id,
            failed_order_id=failed_order_id,
        )

    async def _reject(self, signal: PaymentSignal, error: CheckoutError) -> CheckoutResult:
        self._move(CheckoutState.REJECTED)
        transaction_id = signal.transaction_id or synthesize_transaction_id(failure_reason_prefix(error))
        logger.error(
            "checkout_rejected",
            user_id=self._customer.user_id,
            transaction_id=transaction_id,
            error_code=error.error_code,
            error=str(error),
        )

        failed_order_id = None
        if error.audited:
            failed_order_id = await self._record_failure(transaction_id, error)

        return CheckoutResult(
            state=self._state,
            error=ErrorCodes.PAYMENT_FAILURE_MESSAGE,
            transaction_id=transaction_id,
            failed_order_id=failed_order_id,
        )

    async def _record_failure(self, transaction_id: str, error: CheckoutError) -> Optional[int]:
        """Write the audit record; a failure here is logged and never raised"""
        try:
            return await self._gateway.log_failed_order(
                transaction_id,
                self._order_data(),
                str(error),
                {"code": error.error_code, "userMessage": error.user_message, **error.details},
            )
        except StorefrontError as audit_error:
            logger.error(
                "failed_order_log_failed",
                user_id=self._customer.user_id,
                transaction_id=transaction_id,
                error=str(audit_error),
                original_error=str(error),
            )
            return None

    def _order_data(self) -> Dict[str, Any]:
        snapshot = self._opened_snapshot or self._cart.snapshot()
        data: Dict[str, Any] = {
            **snapshot.to_payload(),
            "total": float(self.opened_amount) if self.opened_amount is not None else None,
            "currency": self._currency,
        }
        if self._quote is not None:
            data["totals"] = self._quote.totals.to_dict()
        live = self._cart.snapshot()
        if live != snapshot:
            data["liveCart"] = live.to_payload()
        return data
