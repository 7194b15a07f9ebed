"""
Dependency Injection Container

Manages the instantiation and lifecycle of dependencies for Clean Architecture.
"""

import logging
import threading
from typing import Any, Dict, Optional

from ...application.checkout.cart_state import CartState
from ...application.checkout.gateway import CheckoutCustomer, CheckoutGateway, InProcessCheckoutGateway
from ...application.checkout.reconciliation import CheckoutSession
from ...application.services.cart_pricing_service import CartPricingService
from ...application.use_cases.failed_order_use_case import FailedOrderUseCase
from ...application.use_cases.order_creation_use_case import OrderCreationUseCase
from ...application.use_cases.payment_verification_use_case import PaymentVerificationUseCase
from ...application.use_cases.product_catalog_use_case import ProductCatalogUseCase
from ...application.use_cases.total_calculation_use_case import TotalCalculationUseCase
from ...domain.repositories.coupon_repository import CouponRepository
from ...domain.repositories.customer_repository import CustomerRepository
from ...domain.repositories.failed_order_repository import FailedOrderRepository
from ...domain.repositories.order_repository import OrderRepository
from ...domain.repositories.product_repository import ProductRepository
from ...domain.services.pricing import PricingPolicy
from ..configuration.config import Settings, get_config
from ..database.operations import DatabaseManager, get_db_manager
from ..repositories.sqlalchemy_coupon_repository import SQLAlchemyCouponRepository
from ..repositories.sqlalchemy_customer_repository import SQLAlchemyCustomerRepository
from ..repositories.sqlalchemy_failed_order_repository import SQLAlchemyFailedOrderRepository
from ..repositories.sqlalchemy_order_repository import SQLAlchemyOrderRepository
from ..repositories.sqlalchemy_product_repository import SQLAlchemyProductRepository
from ..services.storefront_api_client import StorefrontApiClient

logger = logging.getLogger(__name__)


class DependencyContainer:
    """
    Dependency injection container for Clean Architecture

    Manages the instantiation and lifecycle of:
    - Repositories (Infrastructure layer)
    - Pricing policy and service
    - Use Cases (Application layer)
    """

    def __init__(self, config: Optional[Settings] = None, db_manager: Optional[DatabaseManager] = None):
        self._instances: Dict[str, Any] = {}
        self._logger = logging.getLogger(self.__class__.__name__)
        self.config = config or get_config()
        self.db_manager = db_manager or get_db_manager()
        self._setup_dependencies()

    def _setup_dependencies(self):
        """Setup all dependencies and their relationships"""
        self._logger.info("Setting up dependency injection container...")

        self._register_repositories()
        self._register_services()
        self._register_use_cases()

        self._logger.info("Dependency injection container setup complete")

    def _register_repositories(self):
        """Register repository implementations"""
        self._instances["customer_repository"] = SQLAlchemyCustomerRepository(self.db_manager)
        self._instances["product_repository"] = SQLAlchemyProductRepository(self.db_manager)
        self._instances["coupon_repository"] = SQLAlchemyCouponRepository(self.db_manager)
        self._instances["order_repository"] = SQLAlchemyOrderRepository(self.db_manager)
        self._instances["failed_order_repository"] = SQLAlchemyFailedOrderRepository(self.db_manager)

        self._logger.debug("Repositories registered successfully")

    def _register_services(self):
        """Register pricing policy and service"""
        self._instances["pricing_policy"] = PricingPolicy.from_settings(self.config)
        self._instances["cart_pricing_service"] = CartPricingService(
            product_repository=self.get_product_repository(),
            coupon_repository=self.get_coupon_repository(),
            customer_repository=self.get_customer_repository(),
            policy=self.get_pricing_policy(),
        )

        self._logger.debug("Services registered successfully")

    def _register_use_cases(self):
        """Register use case implementations with their dependencies"""
        self._instances["product_catalog_use_case"] = ProductCatalogUseCase(
            product_repository=self.get_product_repository()
        )
        self._instances["total_calculation_use_case"] = TotalCalculationUseCase(
            pricing_service=self.get_cart_pricing_service()
        )
        self._instances["payment_verification_use_case"] = PaymentVerificationUseCase(
            pricing_service=self.get_cart_pricing_service(),
            currency=self.config.currency,
        )
        self._instances["order_creation_use_case"] = OrderCreationUseCase(
            pricing_service=self.get_cart_pricing_service(),
            order_repository=self.get_order_repository(),
            coupon_repository=self.get_coupon_repository(),
        )
        self._instances["failed_order_use_case"] = FailedOrderUseCase(
            failed_order_repository=self.get_failed_order_repository()
        )

        self._logger.debug("Use cases registered successfully")

    # Repository getters
    def get_customer_repository(self) -> CustomerRepository:
        """Get customer repository instance"""
        return self._instances["customer_repository"]

    def get_product_repository(self) -> ProductRepository:
        """Get product repository instance"""
        return self._instances["product_repository"]

    def get_coupon_repository(self) -> CouponRepository:
        return self._instances["coupon_repository"]

    def get_order_repository(self) -> OrderRepository:
        """Get order repository instance"""
        return self._instances["order_repository"]

    def get_failed_order_repository(self) -> FailedOrderRepository:
        return self._instances["failed_order_repository"]

    # Service getters
    def get_pricing_policy(self) -> PricingPolicy:
        return self._instances["pricing_policy"]

    def get_cart_pricing_service(self) -> CartPricingService:
        return self._instances["cart_pricing_service"]

    # Use Case getters
    def get_product_catalog_use_case(self) -> ProductCatalogUseCase:
        """Get product catalog use case instance"""
        return self._instances["product_catalog_use_case"]

    def get_total_calculation_use_case(self) -> TotalCalculationUseCase:
        return self._instances["total_calculation_use_case"]

    def get_payment_verification_use_case(self) -> PaymentVerificationUseCase:
        return self._instances["payment_verification_use_case"]

    def get_order_creation_use_case(self) -> OrderCreationUseCase:
        """Get order creation use case instance"""
        return self._instances["order_creation_use_case"]

    def get_failed_order_use_case(self) -> FailedOrderUseCase:
        return self._instances["failed_order_use_case"]

    def create_checkout_gateway(self, customer: CheckoutCustomer) -> CheckoutGateway:
        """
        Checkout gateway bound to one shopper

        With api_base_url configured the gateway talks HTTP to that backend;
        otherwise it calls the use cases directly.
        """
        if self.config.api_base_url:
            return StorefrontApiClient(
                self.config.api_base_url, customer, timeout=self.config.request_timeout_seconds
            )
        return InProcessCheckoutGateway(
            customer=customer,
            total_use_case=self.get_total_calculation_use_case(),
            payment_use_case=self.get_payment_verification_use_case(),
            order_use_case=self.get_order_creation_use_case(),
            failed_order_use_case=self.get_failed_order_use_case(),
        )

    def create_checkout_session(self, customer: CheckoutCustomer, cart: Optional[CartState] = None) -> CheckoutSession:
        """Checkout session using the configured terminal, provider host and currency"""
        return CheckoutSession(
            gateway=self.create_checkout_gateway(customer),
            cart=cart if cart is not None else CartState(),
            customer=customer,
            policy=self.get_pricing_policy(),
            terminal=self.config.tranzila_terminal_name,
            currency=self.config.currency,
            provider_base_url=self.config.tranzila_base_url,
        )


_container: Optional[DependencyContainer] = None
_container_lock = threading.Lock()


def get_container() -> DependencyContainer:
    """Get the global container instance"""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = DependencyContainer()
    return _container


def set_container(container: Optional[DependencyContainer]) -> None:
    """Replace (or with None, drop) the global container"""
    global _container
    with _container_lock:
        _container = container
