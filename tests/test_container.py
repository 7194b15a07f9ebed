"""
Dependency container tests
"""

import httpx
import pytest

from src.application.checkout.cart_state import CartState
from src.application.checkout.gateway import CheckoutCustomer, InProcessCheckoutGateway
from src.application.checkout.states import CheckoutState
from src.infrastructure.configuration.config import Settings
from src.infrastructure.container.dependency_injection import DependencyContainer, get_container, set_container
from src.infrastructure.services.storefront_api_client import StorefrontApiClient

CUSTOMER = CheckoutCustomer(user_id="user-new", email="new@example.com")


class TestCheckoutFactories:
    """Test checkout gateways and sessions built from settings"""

    def test_in_process_gateway_without_api_url(self, config, db_manager):
        container = DependencyContainer(config, db_manager)
        assert isinstance(container.create_checkout_gateway(CUSTOMER), InProcessCheckoutGateway)

    @pytest.mark.asyncio
    async def test_http_gateway_with_api_url(self, db_manager):
        config = Settings(_env_file=None, api_base_url="https://api.kingsman.example", request_timeout_seconds=12.5)
        container = DependencyContainer(config, db_manager)

        gateway = container.create_checkout_gateway(CUSTOMER)
        try:
            assert isinstance(gateway, StorefrontApiClient)
            assert str(gateway._client.base_url).startswith("https://api.kingsman.example")
            assert gateway._client.timeout == httpx.Timeout(12.5)
        finally:
            await gateway.aclose()

    @pytest.mark.asyncio
    async def test_session_uses_configured_provider(self, db_manager, saddle, new_customer):
        config = Settings(
            _env_file=None,
            tranzila_terminal_name="kingsmanshop",
            tranzila_base_url="https://pay.example.com",
            currency="EUR",
        )
        container = DependencyContainer(config, db_manager)
        await container.get_product_repository().save(saddle)
        await container.get_customer_repository().save(new_customer)

        cart = CartState()
        cart.add_item("saddle-1", 1)
        session = container.create_checkout_session(CUSTOMER, cart)
        await session.calculate()

        url = httpx.URL(session.payment_channel("https://shop.example.com"))
        assert session.state is CheckoutState.AWAITING_PAYMENT
        assert url.host == "pay.example.com"
        assert url.path == "/kingsmanshop/iframenew.php"
        assert url.params["currency"] == "EUR"
        assert url.params["sum"] == "24.66"

    def test_session_starts_with_empty_cart(self, config, db_manager):
        session = DependencyContainer(config, db_manager).create_checkout_session(CUSTOMER)
        assert session.state is CheckoutState.IDLE
        assert session.opened_amount is None


class TestGlobalContainer:
    """Test the process-wide container"""

    def test_set_container_replaces_global(self, config, db_manager):
        container = DependencyContainer(config, db_manager)
        set_container(container)
        try:
            assert get_container() is container
        finally:
            set_container(None)
