"""
Custom exceptions and error reporting for the Kingsman storefront backend
"""

import logging
import traceback
from typing import Any

from src.infrastructure.utilities.constants import ErrorCodes

logger = logging.getLogger(__name__)


class StorefrontError(Exception):
    """Base exception for the storefront backend"""

    status_code = 500

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message)
        self.user_message = user_message or ErrorCodes.GENERIC_ERROR_MESSAGE
        self.error_code = error_code or ErrorCodes.GENERAL_ERROR

    def to_dict(self) -> dict[str, Any]:
        """Render the error as a JSON response body"""
        return {
            "error": self.user_message,
            "details": str(self),
            "code": self.error_code,
        }


class DatabaseError(StorefrontError):
    """Database-related errors"""

    def __init__(self, message: str, operation: str = None):
        super().__init__(
            message,
            ErrorCodes.DATABASE_ERROR_MESSAGE,
            ErrorCodes.DATABASE_ERROR,
        )
        self.operation = operation


class ValidationError(StorefrontError):
    """Input validation errors"""

    status_code = 400

    def __init__(self, message: str, field: str = None, details: str = None):
        super().__init__(
            message, message, ErrorCodes.VALIDATION_ERROR  # Validation errors are user-friendly
        )
        self.field = field
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.details:
            body["details"] = self.details
        return body


class BusinessLogicError(StorefrontError):
    """Business rule violations"""

    status_code = 400

    def __init__(self, message: str, user_message: str = None, error_code: str = None):
        super().__init__(message, user_message or message, error_code or ErrorCodes.BUSINESS_ERROR)


class ProductNotFoundError(BusinessLogicError):
    """Product referenced by a cart item does not exist"""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product {product_id} not found in database",
            "Invalid product",
        )
        self.product_id = product_id


class AuthenticationError(StorefrontError):
    """Caller identity missing or invalid"""

    status_code = 401

    def __init__(self, message: str = "Invalid user authentication"):
        super().__init__(message, message, ErrorCodes.AUTHENTICATION_ERROR)


class PermissionDeniedError(StorefrontError):
    """Caller lacks the role required by the endpoint"""

    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, message, ErrorCodes.PERMISSION_ERROR)


class FailedOrderNotFoundError(StorefrontError):
    """Failed-order audit record not found"""

    status_code = 404

    def __init__(self, failed_order_id: int):
        super().__init__(
            f"Failed order not found: {failed_order_id}",
            "Failed order not found",
            ErrorCodes.NOT_FOUND_ERROR,
        )


class InvalidStateTransitionError(StorefrontError):
    """Checkout state machine received an event its current state does not accept"""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move checkout from {current} to {target}",
            error_code=ErrorCodes.STATE_ERROR,
        )
        self.current = current
        self.target = target


# ---------------------------------------------------------------------------
# Checkout failure taxonomy
# ---------------------------------------------------------------------------


class CheckoutError(StorefrontError):
    """Base class for payment and order reconciliation failures"""

    status_code = 400
    audited = True

    def __init__(self, message: str, user_message: str = None, error_code: str = None,
                 details: dict[str, Any] | None = None):
        super().__init__(message, user_message or message, error_code)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["success"] = False
        body.update(self.details)
        return body


class InvalidAmountError(CheckoutError):
    """Total is non-finite or outside the chargeable bounds; never sent to the provider"""

    audited = False

    def __init__(self, reason: str, amount: Any = None):
        super().__init__(
            f"Invalid payment amount ({amount}): {reason}",
            "Invalid payment amount",
            ErrorCodes.INVALID_AMOUNT,
            details={"reason": reason},
        )
        self.reason = reason
        self.amount = amount


class AmountMismatchError(CheckoutError):
    """Server-recomputed total disagrees with the amount the client charged"""

    def __init__(self, expected_total: float, client_amount: float):
        super().__init__(
            f"Payment amount ({client_amount}) does not match calculated total ({expected_total}). "
            "Please refresh and try again.",
            "Payment amount mismatch",
            ErrorCodes.AMOUNT_MISMATCH,
            details={"expectedTotal": expected_total, "clientAmount": client_amount},
        )
        self.expected_total = expected_total
        self.client_amount = client_amount


class TransactionMissingError(CheckoutError):
    """Payment reported success without a usable provider reference"""

    def __init__(self):
        super().__init__(
            "Transaction ID is required. Payment cannot be processed without a valid "
            "transaction ID from the payment gateway.",
            "Payment verification failed",
            ErrorCodes.TRANSACTION_MISSING,
        )


class UnexpectedPaymentError(CheckoutError):
    """Provider reported success while no payment window was open for it"""

    def __init__(self, state: str):
        super().__init__(
            f"Payment success received while checkout was '{state}'",
            "Payment verification failed",
            ErrorCodes.UNEXPECTED_PAYMENT,
            details={"state": state},
        )
        self.state = state


class OrderCreationError(CheckoutError):
    """Order write failed after a verified payment"""

    def __init__(self, reason: str = None, status: int | None = None, response: Any = None):
        super().__init__(
            f"Order creation failed: {reason}",
            reason or "Order creation failed",
            ErrorCodes.ORDER_CREATION_FAILURE,
            details={"status": status, "response": response},
        )
        self.status = status


class NetworkFailureError(CheckoutError):
    """Transport-level failure talking to the backend"""

    status_code = 502

    def __init__(self, message: str, error_type: str = None):
        super().__init__(
            message,
            "Network request failed",
            ErrorCodes.NETWORK_FAILURE,
            details={"type": error_type},
        )


class ResponseParseError(CheckoutError):
    """Backend answered with a body that is not the expected JSON"""

    status_code = 502

    def __init__(self, message: str, status: int | None = None, status_text: str | None = None):
        super().__init__(
            message,
            "Invalid response from server",
            ErrorCodes.RESPONSE_PARSE_FAILURE,
            details={"status": status, "statusText": status_text, "jsonError": message},
        )


# pylint: disable=too-few-public-methods
class ErrorReporter:
    """Error reporting and monitoring class"""

    @staticmethod
    def report_critical_error(error: Exception):
        """Report critical errors to monitoring system"""
        logger.critical(
            "CRITICAL ERROR: %s",
            error,
            extra={
                "error_type": type(error).__name__,
                "traceback": traceback.format_exc(),
            },
        )

    @staticmethod
    def report_business_error(error: StorefrontError, user_id: str | None):
        """Report business logic errors for analysis"""
        logger.info(
            "Business error: %s - %s",
            error.error_code,
            error,
            extra={
                "error_code": error.error_code,
                "user_id": user_id,
                "error_type": type(error).__name__,
            },
        )

