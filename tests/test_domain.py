"""
Domain Layer Tests
"""

import re
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from src.application.checkout.cart_state import CartState
from src.application.checkout.states import CheckoutState, can_transition, ensure_transition
from src.domain.entities.coupon_entity import Coupon
from src.domain.entities.customer_entity import Customer
from src.domain.entities.failed_order import FailedOrder, synthesize_transaction_id
from src.domain.entities.product_entity import Product
from src.domain.value_objects.coupon_code import CouponCode
from src.domain.value_objects.delivery_address import DeliveryAddress
from src.infrastructure.utilities.exceptions import InvalidStateTransitionError
from src.infrastructure.utilities.helpers import generate_request_id, sanitize_text


class TestCouponCode:
    """Test coupon code normalization"""

    def test_normalized_to_upper_case(self):
        assert CouponCode.parse("  welcome10 ").value == "WELCOME10"

    @pytest.mark.parametrize("raw", [None, "", "   ", 42])
    def test_blank_codes_are_absent(self, raw):
        assert CouponCode.parse(raw) is None

    def test_empty_code_cannot_be_built(self):
        with pytest.raises(ValueError):
            CouponCode("  ")


class TestCoupon:
    """Test coupon usability"""

    def test_usable_coupon(self, big_coupon):
        assert big_coupon.is_usable() is True

    def test_rejection_reasons(self, now):
        assert Coupon("A", Decimal("10"), is_active=False).rejection_reason() == "Coupon is not active"
        expired = Coupon("B", Decimal("10"), expires_at=now - timedelta(days=1))
        assert expired.rejection_reason(now) == "Coupon has expired"
        assert Coupon("C", Decimal("10"), uses_left=0).rejection_reason() == "Coupon has no uses left"

    def test_consume_limited_coupon(self):
        coupon = Coupon("limited", Decimal("10"), uses_left=1)
        assert coupon.code == "LIMITED"
        coupon.consume()
        assert coupon.uses_left == 0
        with pytest.raises(ValueError):
            coupon.consume()

    def test_unlimited_coupon_is_not_decremented(self, big_coupon):
        big_coupon.consume()
        assert big_coupon.uses_left == -1

    def test_percentage_bounds(self):
        with pytest.raises(ValueError):
            Coupon("X", Decimal("120"))


class TestCustomer:
    """Test new-user eligibility"""

    def test_new_user_window(self, now):
        customer = Customer(uid="u1", created_at=now - timedelta(days=91))
        assert customer.is_new_user(3, now) is True
        customer = Customer(uid="u1", created_at=now - timedelta(days=92))
        assert customer.is_new_user(3, now) is False

    def test_unknown_creation_date_is_not_new(self, now):
        assert Customer(uid="u1").is_new_user(3, now) is False

    def test_naive_dates_are_utc(self):
        customer = Customer(uid="u1", created_at=datetime(2024, 1, 1))
        assert customer.created_at.tzinfo is UTC

    def test_uid_required(self):
        with pytest.raises(ValueError):
            Customer(uid=" ")


class TestProduct:
    """Test product pricing and display"""

    def test_sale_price_applies_when_on_sale(self, bridle):
        assert bridle.effective_price == Decimal("250.00")

    def test_sale_without_positive_sale_price(self):
        product = Product(id="p", name=None, price=Decimal("10"), sale=True, sale_price=Decimal("0"))
        assert product.effective_price == Decimal("10")

    def test_to_dict_resolves_language(self, saddle):
        body = saddle.to_dict("he")
        assert body["name"] == "מדרס אוכף"
        assert body["description"] == "Cotton saddle pad"
        assert body["effectivePrice"] == 22.0

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            Product(id="p", name=None, price=Decimal("-1"))


class TestDeliveryAddress:
    """Test delivery address parsing"""

    def test_from_dict(self):
        address = DeliveryAddress.from_dict({"street": " Herzl 1 ", "city": "Haifa", "zipCode": "3100000"})
        assert address.street == "Herzl 1"
        assert address.to_dict()["zipCode"] == "3100000"

    def test_missing_fields(self):
        with pytest.raises(ValueError, match="zipCode"):
            DeliveryAddress.from_dict({"street": "Herzl 1", "city": "Haifa"})
        with pytest.raises(ValueError):
            DeliveryAddress.from_dict(None)


class TestFailedOrder:
    """Test failed-order audit records"""

    def test_synthesized_transaction_id(self):
        moment = datetime(2025, 1, 1, tzinfo=UTC)
        assert synthesize_transaction_id("VERIFY-FAIL", moment) == f"VERIFY-FAIL-{int(moment.timestamp() * 1000)}"

    def test_missing_transaction_id_becomes_unknown(self):
        record = FailedOrder(id=None, transaction_id="", order_data={"total": 24.66}, error="boom")
        assert re.fullmatch(r"UNKNOWN-\d+", record.transaction_id)
        assert record.status == "pending"
        assert record.comment == ""
        assert record.amount == 24.66

    def test_status_and_comment_updates(self):
        record = FailedOrder(id=1, transaction_id="T1", order_data={}, error="boom")
        record.update_status("refunded")
        record.update_comment("  refunded by phone ")
        assert record.status == "refunded"
        assert record.comment == "refunded by phone"
        assert record.updated_at is not None
        with pytest.raises(ValueError):
            record.update_status("lost")

    def test_search(self):
        record = FailedOrder(
            id=1, transaction_id="RefNo-77", order_data={}, error="boom",
            user_email="rider@example.com", user_name="Dana",
        )
        assert record.matches("refno")
        assert record.matches("EXAMPLE")
        assert record.matches("dana")
        assert not record.matches("nobody")


class TestCheckoutStates:
    """Test the transition table"""

    def test_happy_path(self):
        path = [
            CheckoutState.IDLE,
            CheckoutState.CALCULATING,
            CheckoutState.AWAITING_PAYMENT,
            CheckoutState.VERIFYING,
            CheckoutState.SETTLED,
            CheckoutState.IDLE,
        ]
        for current, target in zip(path, path[1:]):
            assert can_transition(current, target)

    def test_rejected_attempt_is_not_verified_again(self):
        assert not can_transition(CheckoutState.REJECTED, CheckoutState.VERIFYING)
        with pytest.raises(InvalidStateTransitionError):
            ensure_transition(CheckoutState.IDLE, CheckoutState.VERIFYING)


class TestCartState:
    """Test the explicit cart state holder"""

    def test_add_merges_same_product(self):
        cart = CartState()
        cart.add_item("saddle-1", 1)
        cart.add_item("saddle-1", 2)
        assert cart.items == [{"productId": "saddle-1", "quantity": 3}]

    def test_snapshot_is_detached(self):
        cart = CartState()
        cart.add_item("saddle-1")
        cart.apply_coupon(" big90 ")
        snapshot = cart.snapshot()
        cart.add_item("bridle-1")
        assert len(snapshot.items) == 1
        assert snapshot.coupon_code == "BIG90"
        assert snapshot.to_payload()["couponCode"] == "BIG90"

    def test_clear_drops_coupon(self):
        cart = CartState()
        cart.add_item("saddle-1")
        cart.apply_coupon("BIG90")
        cart.set_delivery("jerusalem", 12)
        cart.clear()
        assert cart.snapshot().is_empty
        assert cart.coupon_code is None
        assert cart.delivery_zone is None

    def test_delivery_type(self):
        cart = CartState()
        assert cart.snapshot().delivery_type == "pickup"
        cart.set_delivery("south", 3)
        assert cart.snapshot().delivery_type == "delivery"


class TestHelpers:
    """Test shared helpers"""

    def test_request_id_format(self):
        assert re.fullmatch(r"CALC-\d{13}-[a-z0-9]{9}", generate_request_id("CALC"))

    def test_sanitize_text(self):
        assert sanitize_text("  hi\x00 there ") == "hi there"
        assert sanitize_text(None) == ""
        assert sanitize_text("x" * 10, 4) == "xxxx"
