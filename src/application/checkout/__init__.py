"""
Client-side checkout

Payment total reconciliation between the storefront cart, the payment
provider and the backend.
"""

from .cart_state import CartSnapshot, CartState
from .gateway import CheckoutCustomer, CheckoutGateway, InProcessCheckoutGateway, OrderDetails, Quote, VerifiedPayment
from .reconciliation import CheckoutResult, CheckoutSession
from .states import CheckoutState

__all__ = [
    "CartSnapshot",
    "CartState",
    "CheckoutCustomer",
    "CheckoutGateway",
    "CheckoutResult",
    "CheckoutSession",
    "CheckoutState",
    "InProcessCheckoutGateway",
    "OrderDetails",
    "Quote",
    "VerifiedPayment",
]
