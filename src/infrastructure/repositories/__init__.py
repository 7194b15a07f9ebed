"""
Repository implementations

SQLAlchemy-backed implementations of the domain repository interfaces.
"""

from .sqlalchemy_coupon_repository import SQLAlchemyCouponRepository
from .sqlalchemy_customer_repository import SQLAlchemyCustomerRepository
from .sqlalchemy_failed_order_repository import SQLAlchemyFailedOrderRepository
from .sqlalchemy_order_repository import SQLAlchemyOrderRepository
from .sqlalchemy_product_repository import SQLAlchemyProductRepository

__all__ = [
    "SQLAlchemyCouponRepository",
    "SQLAlchemyCustomerRepository",
    "SQLAlchemyFailedOrderRepository",
    "SQLAlchemyOrderRepository",
    "SQLAlchemyProductRepository",
]
