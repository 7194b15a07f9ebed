"""
Domain entities package

Contains the core business entities of the Kingsman storefront.
"""

from .coupon_entity import Coupon
from .customer_entity import Customer
from .failed_order import FailedOrder
from .order_entity import Order, OrderItem
from .order_total import DiscountType, OrderTotal
from .product_entity import Product

__all__ = [
    "Coupon",
    "Customer",
    "DiscountType",
    "FailedOrder",
    "Order",
    "OrderItem",
    "OrderTotal",
    "Product",
]
