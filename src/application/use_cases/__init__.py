"""
Use Cases

Contains the business use cases of the application.
Each use case represents a single business operation.
"""

from .failed_order_use_case import FailedOrderUseCase
from .order_creation_use_case import OrderCreationUseCase
from .payment_verification_use_case import PaymentVerificationUseCase
from .product_catalog_use_case import ProductCatalogUseCase
from .total_calculation_use_case import TotalCalculationUseCase

__all__ = [
    "FailedOrderUseCase",
    "OrderCreationUseCase",
    "PaymentVerificationUseCase",
    "ProductCatalogUseCase",
    "TotalCalculationUseCase",
]
