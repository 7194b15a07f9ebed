"""
Application Use Cases Tests
"""

import logging
import re
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.dtos.order_dtos import CreateOrderRequest, FailedOrderRequest, FailedOrderUpdateRequest
from src.application.dtos.payment_dtos import CalculateTotalRequest, CartItemInput, ProcessPaymentRequest
from src.application.services.cart_pricing_service import CartPricingService
from src.application.use_cases.failed_order_use_case import FailedOrderUseCase
from src.application.use_cases.order_creation_use_case import OrderCreationUseCase
from src.application.use_cases.payment_verification_use_case import PaymentVerificationUseCase
from src.application.use_cases.product_catalog_use_case import ProductCatalogRequest, ProductCatalogUseCase
from src.application.use_cases.total_calculation_use_case import TotalCalculationUseCase
from src.domain.entities.failed_order import FailedOrder
from src.domain.entities.order_total import DiscountType
from src.domain.services.pricing import DEFAULT_POLICY
from src.infrastructure.utilities.exceptions import (
    AmountMismatchError,
    FailedOrderNotFoundError,
    InvalidAmountError,
    ProductNotFoundError,
    TransactionMissingError,
    ValidationError,
)


def _repositories(products, coupon=None, customer=None):
    product_repo = MagicMock()
    product_repo.find_by_ids = AsyncMock(
        side_effect=lambda ids: {pid: products[pid] for pid in ids if pid in products}
    )
    product_repo.find_all_active = AsyncMock(return_value=list(products.values()))
    coupon_repo = MagicMock()
    coupon_repo.find_by_code = AsyncMock(return_value=coupon)
    coupon_repo.mark_used = AsyncMock(return_value=True)
    customer_repo = MagicMock()
    customer_repo.find_by_uid = AsyncMock(return_value=customer)
    return product_repo, coupon_repo, customer_repo


@pytest.fixture
def repos(saddle, bridle, new_customer):
    return _repositories({"saddle-1": saddle, "bridle-1": bridle}, customer=new_customer)


@pytest.fixture
def pricing_service(repos):
    product_repo, coupon_repo, customer_repo = repos
    return CartPricingService(product_repo, coupon_repo, customer_repo, DEFAULT_POLICY)


def _items(*pairs):
    return [CartItemInput(product_id=pid, quantity=qty) for pid, qty in pairs]


class TestCartPricingService:
    """Test server-side cart pricing"""

    @pytest.mark.asyncio
    async def test_uses_stored_and_sale_prices(self, pricing_service):
        subtotal, lines = await pricing_service.compute_subtotal(_items(("saddle-1", 2), ("bridle-1", 1)))
        assert subtotal == Decimal("294.00")
        assert [line.unit_price for line in lines] == [Decimal("22.00"), Decimal("250.00")]

    @pytest.mark.asyncio
    async def test_client_price_ignored_for_catalog_items(self, pricing_service):
        items = [CartItemInput(product_id="saddle-1", quantity=1, price=0.01)]
        subtotal, _ = await pricing_service.compute_subtotal(items)
        assert subtotal == Decimal("22.00")

    @pytest.mark.asyncio
    async def test_custom_item_uses_client_price(self, pricing_service):
        items = [CartItemInput(name="Engraving", quantity=2, price=15.5)]
        subtotal, _ = await pricing_service.compute_subtotal(items)
        assert subtotal == Decimal("31.00")

    @pytest.mark.asyncio
    async def test_missing_quantity_counts_as_one(self, pricing_service):
        subtotal, _ = await pricing_service.compute_subtotal([CartItemInput(product_id="saddle-1")])
        assert subtotal == Decimal("22.00")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1, 1.5, float("inf")])
    async def test_invalid_quantity(self, pricing_service, quantity):
        with pytest.raises(ValidationError, match="Invalid item quantity"):
            await pricing_service.compute_subtotal([CartItemInput(product_id="saddle-1", quantity=quantity)])

    @pytest.mark.asyncio
    async def test_invalid_custom_price(self, pricing_service):
        with pytest.raises(ValidationError, match="Invalid item price"):
            await pricing_service.compute_subtotal([CartItemInput(name="Custom", quantity=1, price=-3)])

    @pytest.mark.asyncio
    async def test_unknown_product(self, pricing_service):
        with pytest.raises(ProductNotFoundError):
            await pricing_service.compute_subtotal(_items(("ghost", 1)))

    @pytest.mark.asyncio
    async def test_legacy_client_subtotal_is_logged(self, pricing_service, caplog):
        with caplog.at_level(logging.WARNING, logger="security"):
            subtotal, lines = await pricing_service.compute_subtotal([], client_subtotal=50, user_id="u1")
        assert subtotal == Decimal("50.00")
        assert lines == []
        assert "using client subtotal" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("subtotal", [None, -1, "50", float("nan")])
    async def test_no_items_and_no_valid_subtotal(self, pricing_service, subtotal):
        with pytest.raises(ValidationError):
            await pricing_service.compute_subtotal([], client_subtotal=subtotal)

    @pytest.mark.asyncio
    async def test_unknown_customer_is_not_new(self, saddle):
        product_repo, coupon_repo, customer_repo = _repositories({"saddle-1": saddle})
        service = CartPricingService(product_repo, coupon_repo, customer_repo, DEFAULT_POLICY)
        priced = await service.price_cart(_items(("saddle-1", 1)), "stranger")
        assert priced.totals.discount_type is DiscountType.NONE


class TestTotalCalculationUseCase:
    """Test calculate-total"""

    @pytest.mark.asyncio
    async def test_new_user_discount(self, pricing_service):
        use_case = TotalCalculationUseCase(pricing_service)
        response = await use_case.execute(CalculateTotalRequest(user_id="user-new", items=_items(("saddle-1", 1))))

        assert re.fullmatch(r"CALC-\d+-[a-z0-9]{9}", response.request_id)
        body = response.to_dict()
        assert body["total"] == 24.66
        assert body["discount"] == {"amount": 1.1, "percentage": 5.0, "type": "new_user"}

    @pytest.mark.asyncio
    async def test_coupon_replaces_new_user_discount(self, saddle, new_customer, big_coupon):
        service = CartPricingService(
            *_repositories({"saddle-1": saddle}, coupon=big_coupon, customer=new_customer), DEFAULT_POLICY
        )
        response = await TotalCalculationUseCase(service).execute(
            CalculateTotalRequest(user_id="user-new", items=_items(("saddle-1", 1)), coupon_code="big90")
        )
        assert response.totals.total == Decimal("2.60")
        assert response.totals.discount_type is DiscountType.COUPON
        assert response.coupon_code == "BIG90"

    @pytest.mark.asyncio
    async def test_invalid_coupon_yields_no_discount(self, repos, pricing_service):
        response = await TotalCalculationUseCase(pricing_service).execute(
            CalculateTotalRequest(user_id="user-new", items=_items(("saddle-1", 1)), coupon_code="NOPE")
        )
        assert response.totals.discount_type is DiscountType.NONE
        assert response.totals.total == Decimal("25.96")
        assert response.to_dict()["couponError"] == "Invalid coupon code"

    @pytest.mark.asyncio
    async def test_idempotent_and_never_consumes_coupons(self, saddle, big_coupon, old_customer):
        product_repo, coupon_repo, customer_repo = _repositories(
            {"saddle-1": saddle}, coupon=big_coupon, customer=old_customer
        )
        use_case = TotalCalculationUseCase(CartPricingService(product_repo, coupon_repo, customer_repo, DEFAULT_POLICY))
        request = CalculateTotalRequest(user_id="user-old", items=_items(("saddle-1", 1)), coupon_code="BIG90")

        first = await use_case.execute(request)
        second = await use_case.execute(request)

        assert first.totals == second.totals
        coupon_repo.mark_used.assert_not_called()

    @pytest.mark.asyncio
    async def test_client_delivery_cost_mismatch_is_logged(self, pricing_service, caplog):
        request = CalculateTotalRequest(
            user_id="user-new", items=_items(("saddle-1", 1)), delivery_zone="jerusalem", client_delivery_cost=10
        )
        with caplog.at_level(logging.WARNING, logger="security"):
            response = await TotalCalculationUseCase(pricing_service).execute(request)
        assert response.totals.delivery_cost == Decimal("85.00")
        assert "Delivery cost mismatch" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("client_cost", [float("nan"), float("inf"), -5])
    async def test_unusable_client_delivery_cost_is_ignored(self, pricing_service, caplog, client_cost):
        request = CalculateTotalRequest(
            user_id="user-new", items=_items(("saddle-1", 1)), delivery_zone="jerusalem", client_delivery_cost=client_cost
        )
        with caplog.at_level(logging.WARNING, logger="security"):
            response = await TotalCalculationUseCase(pricing_service).execute(request)
        assert response.totals.delivery_cost == Decimal("85.00")
        assert "Delivery cost mismatch" not in caplog.text


class TestPaymentVerificationUseCase:
    """Test payment verification"""

    def _request(self, **overrides):
        data = {
            "user_id": "user-new",
            "amount": 24.66,
            "items": _items(("saddle-1", 1)),
            "transaction_id": "T-100",
        }
        data.update(overrides)
        return ProcessPaymentRequest(**data)

    @pytest.mark.asyncio
    async def test_verified_payment(self, pricing_service):
        response = await PaymentVerificationUseCase(pricing_service).execute(self._request())
        body = response.to_dict()
        assert body["success"] is True
        assert body["transactionId"] == "T-100"
        assert body["expectedTotal"] == 24.66
        assert body["status"] == "completed"
        assert body["paymentGateway"] == "tranzila"
        assert response.request_id.startswith("PAY-")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [None, 0, -10, float("nan")])
    async def test_invalid_amount(self, pricing_service, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            await PaymentVerificationUseCase(pricing_service).execute(self._request(amount=amount))
        assert exc_info.value.to_dict()["error"] == "Invalid payment amount"

    @pytest.mark.asyncio
    async def test_amount_mismatch_is_a_security_event(self, pricing_service, caplog):
        with caplog.at_level(logging.WARNING, logger="security"):
            with pytest.raises(AmountMismatchError) as exc_info:
                await PaymentVerificationUseCase(pricing_service).execute(self._request(amount=2.60))

        body = exc_info.value.to_dict()
        assert body["error"] == "Payment amount mismatch"
        assert body["expectedTotal"] == 24.66
        assert body["clientAmount"] == 2.6
        assert "SECURITY EVENT" in caplog.text

    @pytest.mark.asyncio
    async def test_transaction_id_from_provider_response(self, pricing_service):
        request = self._request(transaction_id=None, tranzila_response={"RefNo": "REF-1"})
        response = await PaymentVerificationUseCase(pricing_service).execute(request)
        assert response.transaction_id == "REF-1"

    @pytest.mark.asyncio
    async def test_missing_transaction_id(self, pricing_service):
        with pytest.raises(TransactionMissingError) as exc_info:
            await PaymentVerificationUseCase(pricing_service).execute(self._request(transaction_id=None))
        assert exc_info.value.user_message == "Payment verification failed"


class TestOrderCreationUseCase:
    """Test order creation"""

    @pytest.fixture
    def order_repo(self):
        repo = MagicMock()

        async def create_order(order):
            order.id = 42
            return order

        repo.create_order = AsyncMock(side_effect=create_order)
        return repo

    def _request(self, **overrides):
        data = {
            "user_id": "user-new",
            "user_email": "new@example.com",
            "items": _items(("saddle-1", 1)),
            "total": 24.66,
            "transaction_id": "T-100",
            "language": "he",
        }
        data.update(overrides)
        return CreateOrderRequest(**data)

    @pytest.mark.asyncio
    async def test_creates_order_with_resolved_names(self, repos, pricing_service, order_repo):
        _, coupon_repo, _ = repos
        use_case = OrderCreationUseCase(pricing_service, order_repo, coupon_repo)

        response = await use_case.create_order(self._request())

        assert response.to_dict() == {"id": 42, "message": "Order created successfully", "total": 24.66}
        order = order_repo.create_order.call_args.args[0]
        assert order.items[0].name == "מדרס אוכף"
        assert order.totals.total == Decimal("24.66")
        coupon_repo.mark_used.assert_not_called()

    @pytest.mark.asyncio
    async def test_coupon_consumed_on_creation(self, saddle, new_customer, big_coupon, order_repo):
        product_repo, coupon_repo, customer_repo = _repositories(
            {"saddle-1": saddle}, coupon=big_coupon, customer=new_customer
        )
        service = CartPricingService(product_repo, coupon_repo, customer_repo, DEFAULT_POLICY)
        use_case = OrderCreationUseCase(service, order_repo, coupon_repo)

        await use_case.create_order(self._request(total=2.60, coupon_code="big90"))

        coupon_repo.mark_used.assert_awaited_once_with("BIG90", "user-new")

    @pytest.mark.asyncio
    async def test_total_mismatch_writes_nothing(self, repos, pricing_service, order_repo):
        _, coupon_repo, _ = repos
        use_case = OrderCreationUseCase(pricing_service, order_repo, coupon_repo)

        with pytest.raises(AmountMismatchError):
            await use_case.create_order(self._request(total=2.60))
        order_repo.create_order.assert_not_called()

    @pytest.mark.asyncio
    async def test_items_required(self, repos, pricing_service, order_repo):
        use_case = OrderCreationUseCase(pricing_service, order_repo, repos[1])
        with pytest.raises(ValidationError):
            await use_case.create_order(self._request(items=[]))

    @pytest.mark.asyncio
    async def test_delivery_needs_complete_address(self, repos, pricing_service, order_repo):
        use_case = OrderCreationUseCase(pricing_service, order_repo, repos[1])
        request = self._request(
            metadata={"deliveryType": "delivery", "deliveryZone": "jerusalem"},
            shipping_address={"street": "Herzl 1", "city": "Haifa"},
        )
        with pytest.raises(ValidationError, match="zipCode"):
            await use_case.create_order(request)

    @pytest.mark.asyncio
    async def test_delivery_order_includes_fee(self, repos, pricing_service, order_repo):
        use_case = OrderCreationUseCase(pricing_service, order_repo, repos[1])
        request = self._request(
            total=109.66,
            metadata={"deliveryType": "delivery", "deliveryZone": "jerusalem", "totalWeight": 2},
            shipping_address={"street": "Herzl 1", "city": "Haifa", "zipCode": "3100000"},
        )
        response = await use_case.create_order(request)
        assert response.total == 109.66
        order = order_repo.create_order.call_args.args[0]
        assert order.shipping_address["zipCode"] == "3100000"
        assert order.totals.delivery_cost == Decimal("85.00")


class TestFailedOrderUseCase:
    """Test the failed-order audit log"""

    @pytest.fixture
    def repo(self):
        repo = MagicMock()

        async def add(record):
            record.id = 7
            return record

        repo.add = AsyncMock(side_effect=add)
        return repo

    @pytest.mark.asyncio
    async def test_record_synthesizes_transaction_id(self, repo):
        record = await FailedOrderUseCase(repo).record(
            FailedOrderRequest(order_data={"total": 2.6}, error="Payment amount mismatch", user_id="u1")
        )
        assert record.id == 7
        assert record.transaction_id.startswith("UNKNOWN-")
        assert record.status == "pending"
        assert record.amount == 2.6

    @pytest.mark.asyncio
    async def test_record_requires_order_data_and_error(self, repo):
        with pytest.raises(ValidationError):
            await FailedOrderUseCase(repo).record(FailedOrderRequest(order_data=None, error="x"))
        with pytest.raises(ValidationError):
            await FailedOrderUseCase(repo).record(FailedOrderRequest(order_data={}, error=""))

    @pytest.mark.asyncio
    async def test_list_filters_by_query(self):
        records = [
            FailedOrder(id=1, transaction_id="T1", order_data={}, error="e", user_email="a@example.com"),
            FailedOrder(id=2, transaction_id="T2", order_data={}, error="e", user_email="b@example.com"),
        ]
        repo = MagicMock()
        repo.list = AsyncMock(return_value=records)

        result = await FailedOrderUseCase(repo).list_failed_orders(status="pending", query="b@")

        assert [record.id for record in result] == [2]
        repo.list.assert_awaited_once_with(status="pending")

    @pytest.mark.asyncio
    async def test_list_rejects_unknown_status(self):
        with pytest.raises(ValidationError):
            await FailedOrderUseCase(MagicMock()).list_failed_orders(status="lost")

    @pytest.mark.asyncio
    async def test_update(self):
        record = FailedOrder(id=1, transaction_id="T1", order_data={}, error="e")
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=record)
        repo.update = AsyncMock(side_effect=lambda updated: updated)

        updated = await FailedOrderUseCase(repo).update(
            FailedOrderUpdateRequest(failed_order_id=1, status="resolved", comment="order re-created")
        )
        assert updated.status == "resolved"
        assert updated.comment == "order re-created"

    @pytest.mark.asyncio
    async def test_update_unknown_record(self):
        repo = MagicMock()
        repo.get_by_id = AsyncMock(return_value=None)
        with pytest.raises(FailedOrderNotFoundError):
            await FailedOrderUseCase(repo).update(FailedOrderUpdateRequest(failed_order_id=99, status="resolved"))


class TestProductCatalogUseCase:
    """Test product catalog use case"""

    @pytest.mark.asyncio
    async def test_lists_in_language(self, repos):
        response = await ProductCatalogUseCase(repos[0]).list_products(ProductCatalogRequest(language="ar"))
        names = [product["name"] for product in response.products]
        assert names == ["لبادة سرج", "Leather bridle"]

    @pytest.mark.asyncio
    async def test_unsupported_language_falls_back(self, repos):
        response = await ProductCatalogUseCase(repos[0]).list_products(ProductCatalogRequest(language="fr"))
        assert response.language == "en"
