"""
Application constants for the Kingsman storefront backend

Centralizes magic numbers and hard-coded strings shared across layers.
"""

from typing import Final


# Application timeout settings
class RetrySettings:
    """Connection timeouts"""

    CONNECTION_TIMEOUT_SECONDS: Final[int] = 60


# Database configuration constants
class DatabaseSettings:
    """Database connection and pool configuration"""

    POOL_RECYCLE_SECONDS: Final[int] = 3600  # 1 hour

    # Production settings
    PRODUCTION_POOL_SIZE: Final[int] = 20
    PRODUCTION_MAX_OVERFLOW: Final[int] = 30

    # Development settings
    DEVELOPMENT_POOL_SIZE: Final[int] = 5
    DEVELOPMENT_MAX_OVERFLOW: Final[int] = 10


# Logging configuration constants
class LoggingSettings:
    """Logging file sizes and rotation settings"""

    MAX_LOG_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10MB
    SECURITY_LOG_FILE_SIZE: Final[int] = 5 * 1024 * 1024  # 5MB

    # Backup counts
    MAIN_LOG_BACKUP_COUNT: Final[int] = 10
    ERROR_LOG_BACKUP_COUNT: Final[int] = 10
    SECURITY_LOG_BACKUP_COUNT: Final[int] = 10

    SECURITY_EVENT_MARKER: Final[str] = "SECURITY EVENT"


# Performance monitoring constants
class PerformanceSettings:
    """Performance thresholds and monitoring settings"""

    SLOW_QUERY_THRESHOLD_MS: Final[int] = 1000


# Payment and pricing constants
class PaymentSettings:
    """Payment flow constants"""

    DEFAULT_CURRENCY: Final[str] = "ILS"
    APPROVED_RESPONSE_CODE: Final[str] = "000"
    CALCULATION_REQUEST_PREFIX: Final[str] = "CALC"
    PAYMENT_REQUEST_PREFIX: Final[str] = "PAY"

    # Prefixes for synthesized failed-order transaction ids
    UNKNOWN_REASON: Final[str] = "UNKNOWN"
    VERIFY_FAIL_REASON: Final[str] = "VERIFY-FAIL"
    NETWORK_ERROR_REASON: Final[str] = "NETWORK-ERROR"
    JSON_ERROR_REASON: Final[str] = "JSON-ERROR"


class FailedOrderStatus:
    """Review states of a failed-order audit record"""

    PENDING: Final[str] = "pending"
    RESOLVED: Final[str] = "resolved"
    REFUNDED: Final[str] = "refunded"

    ALL: Final[tuple] = (PENDING, RESOLVED, REFUNDED)


class DeliveryTypes:
    """Order fulfilment types"""

    DELIVERY: Final[str] = "delivery"
    PICKUP: Final[str] = "pickup"

    REQUIRED_ADDRESS_FIELDS: Final[tuple] = ("street", "city", "zipCode")


# Error codes and messages
class ErrorCodes:
    """Standardized error codes and messages"""

    GENERAL_ERROR: Final[str] = "GENERAL_ERROR"
    DATABASE_ERROR: Final[str] = "DATABASE_ERROR"
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
    BUSINESS_ERROR: Final[str] = "BUSINESS_ERROR"
    AUTHENTICATION_ERROR: Final[str] = "AUTHENTICATION_ERROR"
    PERMISSION_ERROR: Final[str] = "PERMISSION_ERROR"
    NOT_FOUND_ERROR: Final[str] = "NOT_FOUND_ERROR"
    STATE_ERROR: Final[str] = "STATE_ERROR"

    # Checkout taxonomy
    INVALID_AMOUNT: Final[str] = "INVALID_AMOUNT"
    AMOUNT_MISMATCH: Final[str] = "AMOUNT_MISMATCH"
    TRANSACTION_MISSING: Final[str] = "TRANSACTION_MISSING"
    ORDER_CREATION_FAILURE: Final[str] = "ORDER_CREATION_FAILURE"
    NETWORK_FAILURE: Final[str] = "NETWORK_FAILURE"
    RESPONSE_PARSE_FAILURE: Final[str] = "RESPONSE_PARSE_FAILURE"
    UNEXPECTED_PAYMENT: Final[str] = "UNEXPECTED_PAYMENT"

    # User-friendly messages
    GENERIC_ERROR_MESSAGE: Final[str] = "An error occurred. Please try again."
    DATABASE_ERROR_MESSAGE: Final[
        str
    ] = "Sorry, there was a problem with our system. Please try again in a moment."
    PAYMENT_FAILURE_MESSAGE: Final[str] = (
        "We could not complete your order. If you were charged, our team will contact you."
    )


# File and directory constants
class FileSettings:
    """File paths and directory settings"""

    # Log file names
    MAIN_LOG_FILE: Final[str] = "app.log"
    ERROR_LOG_FILE: Final[str] = "errors.log"
    SECURITY_LOG_FILE: Final[str] = "security.log"


class ConfigValidation:
    """Values accepted by the configuration validator"""

    SQLITE_PREFIX: Final[str] = "sqlite:///"
    VALID_ENVIRONMENTS: Final[tuple] = ("development", "test", "staging", "production")
    VALID_CURRENCIES: Final[tuple] = ("ILS", "USD", "EUR")
