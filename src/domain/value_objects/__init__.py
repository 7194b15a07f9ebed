"""
Domain value objects package

Contains immutable value objects that represent concepts in the business domain.
"""

from .coupon_code import CouponCode
from .delivery_address import DeliveryAddress
from .money import round_currency
from .multilingual_text import MultilingualText, PlainText, resolve
from .payment_signal import PaymentSignal, PaymentSignalKind

__all__ = [
    "CouponCode",
    "DeliveryAddress",
    "MultilingualText",
    "PaymentSignal",
    "PaymentSignalKind",
    "PlainText",
    "resolve",
    "round_currency",
]
