"""
Pricing rules tests
"""

from decimal import Decimal

import pytest

from src.domain.entities.order_total import DiscountType, OrderTotal
from src.domain.services.pricing import (
    DEFAULT_POLICY,
    INVALID_TOTAL_REASON,
    TOTAL_TOO_HIGH_REASON,
    TOTAL_TOO_LOW_REASON,
    PricingPolicy,
    calculate_delivery_cost,
    calculate_discount_amount,
    select_discount,
    validate_amount,
)
from src.domain.value_objects.money import round_currency


class TestDiscount:
    """Test discount amount and precedence"""

    def test_discount_amount_is_rounded(self):
        assert calculate_discount_amount(22, 5) == Decimal("1.10")
        assert calculate_discount_amount(Decimal("10.05"), 50) == Decimal("5.03")

    @pytest.mark.parametrize(
        "subtotal,percentage",
        [(-1, 10), (100, -5), (100, 101), (float("nan"), 10), (float("inf"), 10), (100, None)],
    )
    def test_invalid_input_gives_no_discount(self, subtotal, percentage):
        assert calculate_discount_amount(subtotal, percentage) == Decimal("0")

    def test_discount_never_exceeds_subtotal(self):
        assert calculate_discount_amount(Decimal("0.01"), 100) == Decimal("0.01")

    def test_coupon_wins_over_new_user(self):
        selection = select_discount(Decimal("22"), Decimal("90"), Decimal("5"), coupon_present=True)
        assert selection.discount_type is DiscountType.COUPON
        assert selection.amount == Decimal("19.80")

    def test_invalid_coupon_disables_new_user_discount(self):
        selection = select_discount(Decimal("22"), None, Decimal("5"), coupon_present=True)
        assert selection.discount_type is DiscountType.NONE
        assert selection.amount == Decimal("0")

    def test_new_user_without_coupon(self):
        selection = select_discount(Decimal("22"), None, Decimal("5"), coupon_present=False)
        assert selection.discount_type is DiscountType.NEW_USER
        assert selection.amount == Decimal("1.10")


class TestCalculateTotal:
    """Test full price breakdowns"""

    def test_coupon_breakdown(self):
        totals = DEFAULT_POLICY.calculate_total(22, coupon_percentage=90, coupon_present=True)
        assert totals.discount_amount == Decimal("19.80")
        assert totals.subtotal_after_discount == Decimal("2.20")
        assert totals.tax == Decimal("0.40")
        assert totals.total == Decimal("2.60")
        assert totals.discount_type is DiscountType.COUPON

    def test_new_user_breakdown(self):
        totals = DEFAULT_POLICY.calculate_total(22, is_new_user=True)
        assert totals.discount_amount == Decimal("1.10")
        assert totals.subtotal_after_discount == Decimal("20.90")
        assert totals.tax == Decimal("3.76")
        assert totals.total == Decimal("24.66")
        assert totals.discount_type is DiscountType.NEW_USER

    def test_no_discount(self):
        totals = DEFAULT_POLICY.calculate_total(100)
        assert totals.discount_amount == Decimal("0")
        assert totals.tax == Decimal("18.00")
        assert totals.total == Decimal("118.00")
        assert totals.to_dict()["discount"] is None

    def test_delivery_is_neither_taxed_nor_discounted(self):
        totals = DEFAULT_POLICY.calculate_total(100, is_new_user=True, delivery_zone="telaviv_north", total_weight=5)
        assert totals.subtotal_after_discount == Decimal("95.00")
        assert totals.tax == Decimal("17.10")
        assert totals.delivery_cost == Decimal("65.00")
        assert totals.total == Decimal("177.10")

    def test_negative_subtotal_is_rejected(self):
        with pytest.raises(ValueError):
            DEFAULT_POLICY.calculate_total(-5)

    def test_wire_shape(self):
        body = DEFAULT_POLICY.calculate_total(22, coupon_percentage=90, coupon_present=True).to_dict()
        assert body == {
            "total": 2.6,
            "subtotal": 2.2,
            "subtotalBeforeDiscount": 22.0,
            "tax": 0.4,
            "deliveryCost": 0.0,
            "discount": {"amount": 19.8, "percentage": 90.0, "type": "coupon"},
        }
        assert OrderTotal.from_dict(body).total == Decimal("2.6")

    def test_order_total_invariants(self):
        with pytest.raises(ValueError):
            OrderTotal(
                subtotal_before_discount=Decimal("10"),
                discount_amount=Decimal("0"),
                discount_type=DiscountType.NONE,
                subtotal_after_discount=Decimal("10"),
                tax=Decimal("1.80"),
                delivery_cost=Decimal("0"),
                total=Decimal("12.00"),
            )
        with pytest.raises(ValueError):
            OrderTotal(
                subtotal_before_discount=Decimal("10"),
                discount_amount=Decimal("11"),
                discount_type=DiscountType.COUPON,
                subtotal_after_discount=Decimal("-1"),
                tax=Decimal("0"),
                delivery_cost=Decimal("0"),
                total=Decimal("-1"),
            )


class TestDelivery:
    """Test delivery fee rules"""

    def test_pickup_is_free(self):
        assert calculate_delivery_cost(100, None) == Decimal("0")
        assert calculate_delivery_cost(100, "atlantis") == Decimal("0")

    def test_zone_fees(self):
        assert calculate_delivery_cost(100, "telaviv_north") == Decimal("65.00")
        assert calculate_delivery_cost(100, "jerusalem") == Decimal("85.00")

    def test_weight_doubles_fee_at_most(self):
        assert calculate_delivery_cost(100, "south", 30) == Decimal("85.00")
        assert calculate_delivery_cost(100, "south", 31) == Decimal("170.00")
        assert calculate_delivery_cost(100, "south", 200) == Decimal("170.00")

    def test_free_delivery_thresholds(self):
        assert calculate_delivery_cost(850, "jerusalem") == Decimal("0")
        assert calculate_delivery_cost(849.99, "jerusalem") == Decimal("85.00")
        assert calculate_delivery_cost(1000, "westbank") == Decimal("85.00")
        assert calculate_delivery_cost(1500, "westbank") == Decimal("0")


class TestValidateAmount:
    """Test chargeable amount bounds"""

    @pytest.mark.parametrize("total", [None, 0, -5, float("nan"), float("inf"), "abc", True])
    def test_invalid_totals(self, total):
        result = validate_amount(total)
        assert result.valid is False
        assert result.reason == INVALID_TOTAL_REASON

    def test_bounds(self):
        assert validate_amount(0.99).reason == TOTAL_TOO_LOW_REASON
        assert validate_amount(1).valid is True
        assert validate_amount(100000).valid is True
        assert validate_amount(100000.01).reason == TOTAL_TOO_HIGH_REASON

    def test_bounds_come_from_policy(self):
        policy = PricingPolicy(min_payment_amount=5, max_payment_amount=10)
        assert policy.validate_amount(4).valid is False
        assert policy.validate_amount(10).valid is True

    def test_amounts_match_after_rounding(self):
        assert DEFAULT_POLICY.amounts_match(Decimal("24.66"), 24.66) is True
        assert DEFAULT_POLICY.amounts_match(Decimal("24.66"), 24.664) is True
        assert DEFAULT_POLICY.amounts_match(Decimal("24.66"), 2.60) is False
        assert DEFAULT_POLICY.amounts_match(None, 2.60) is False

    def test_round_currency_is_half_up(self):
        assert round_currency("0.125") == Decimal("0.13")
        with pytest.raises(ValueError):
            round_currency("nan")


def test_policy_from_settings(config):
    policy = PricingPolicy.from_settings(config)
    assert policy.vat_rate == Decimal("0.18")
    assert policy.delivery_zone_fees["telaviv_north"] == Decimal("65.0")
    assert policy.calculate_total(22, is_new_user=True).total == Decimal("24.66")
