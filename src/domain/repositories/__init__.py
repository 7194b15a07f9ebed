"""
Domain repository interfaces

Contains abstract repository interfaces that define contracts for data access.
"""

from .coupon_repository import CouponRepository
from .customer_repository import CustomerRepository
from .failed_order_repository import FailedOrderRepository
from .order_repository import OrderRepository
from .product_repository import ProductRepository

__all__ = [
    "CouponRepository",
    "CustomerRepository",
    "FailedOrderRepository",
    "OrderRepository",
    "ProductRepository",
]
