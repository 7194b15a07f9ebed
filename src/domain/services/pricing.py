"""
Pricing rules

Pure functions that turn a subtotal, a discount selection and a delivery
choice into an OrderTotal. Every caller that computes a price (the
calculate-total endpoint, payment verification, order creation and the
client-side checkout) goes through PricingPolicy so the numbers agree.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

from src.domain.entities.order_total import DiscountType, OrderTotal
from src.domain.value_objects.money import round_currency

if TYPE_CHECKING:
    from src.infrastructure.configuration.config import Settings

ZERO = Decimal("0")
HUNDRED = Decimal("100")

INVALID_TOTAL_REASON = "Invalid or missing total"
TOTAL_TOO_LOW_REASON = "Total too low (< 1 ILS)"
TOTAL_TOO_HIGH_REASON = "Total too high (> 100,000 ILS)"


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Decimal for finite numbers, None for everything else"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (ArithmeticError, ValueError):
        return None
    return result if result.is_finite() else None


def calculate_discount_amount(subtotal: Any, percentage: Any) -> Decimal:
    """
    Discount for `percentage` % of `subtotal`, rounded to cents.

    Invalid input (negative, non-finite, percentage outside [0, 100])
    yields no discount. The result never exceeds the subtotal.
    """
    amount = _to_decimal(subtotal)
    pct = _to_decimal(percentage)
    if amount is None or pct is None or amount < 0 or not ZERO <= pct <= HUNDRED:
        return ZERO

    discount = round_currency(amount * pct / HUNDRED)
    return min(discount, round_currency(amount))


@dataclass(frozen=True)
class DiscountSelection:
    """Which discount applies and how much it is worth"""

    discount_type: DiscountType
    percentage: Decimal
    amount: Decimal


NO_DISCOUNT = DiscountSelection(DiscountType.NONE, ZERO, ZERO)


def select_discount(
    subtotal: Any,
    coupon_percentage: Optional[Any],
    new_user_percentage: Optional[Any],
    coupon_present: bool,
) -> DiscountSelection:
    """
    Apply the discount precedence rule.

    A coupon that was entered decides the discount on its own: when it is
    invalid (coupon_percentage is None) there is no discount at all and the
    new-user rule is not consulted.
    """
    if coupon_present:
        discount_type, percentage = DiscountType.COUPON, coupon_percentage
    else:
        discount_type, percentage = DiscountType.NEW_USER, new_user_percentage

    if percentage is None:
        return NO_DISCOUNT

    amount = calculate_discount_amount(subtotal, percentage)
    if amount <= 0:
        return NO_DISCOUNT
    return DiscountSelection(discount_type, round_currency(percentage), amount)


def calculate_tax(subtotal_after_discount: Decimal, vat_rate: Any) -> Decimal:
    """VAT on the discounted subtotal"""
    # Delivery is not part of the tax base
    return round_currency(subtotal_after_discount * Decimal(str(vat_rate)))


@dataclass(frozen=True)
class AmountValidation:
    """Outcome of checking a total before it is sent to the provider"""

    valid: bool
    reason: Optional[str] = None


class PricingPolicy:
    """Store pricing configuration bound to the pure pricing rules"""

    def __init__(
        self,
        vat_rate: Any = Decimal("0.18"),
        new_user_discount_percentage: Any = Decimal("5"),
        new_user_discount_months: int = 3,
        min_payment_amount: Any = Decimal("1"),
        max_payment_amount: Any = Decimal("100000"),
        delivery_zone_fees: Optional[Dict[str, Any]] = None,
        free_delivery_thresholds: Optional[Dict[str, Any]] = None,
        default_free_delivery_threshold: Any = Decimal("850"),
        delivery_weight_step_kg: Any = Decimal("30"),
        max_delivery_fee_multiplier: int = 2,
    ):
        self.vat_rate = Decimal(str(vat_rate))
        self.new_user_discount_percentage = Decimal(str(new_user_discount_percentage))
        self.new_user_discount_months = new_user_discount_months
        self.min_payment_amount = Decimal(str(min_payment_amount))
        self.max_payment_amount = Decimal(str(max_payment_amount))
        self.delivery_zone_fees = {
            zone: Decimal(str(fee)) for zone, fee in (delivery_zone_fees or {}).items()
        }
        self.free_delivery_thresholds = {
            zone: Decimal(str(limit)) for zone, limit in (free_delivery_thresholds or {}).items()
        }
        self.default_free_delivery_threshold = Decimal(str(default_free_delivery_threshold))
        self.delivery_weight_step_kg = Decimal(str(delivery_weight_step_kg))
        self.max_delivery_fee_multiplier = max_delivery_fee_multiplier

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PricingPolicy":
        return cls(
            vat_rate=settings.vat_rate,
            new_user_discount_percentage=settings.new_user_discount_percentage,
            new_user_discount_months=settings.new_user_discount_months,
            min_payment_amount=settings.min_payment_amount,
            max_payment_amount=settings.max_payment_amount,
            delivery_zone_fees=settings.delivery_zone_fees,
            free_delivery_thresholds=settings.free_delivery_thresholds,
            default_free_delivery_threshold=settings.default_free_delivery_threshold,
            delivery_weight_step_kg=settings.delivery_weight_step_kg,
            max_delivery_fee_multiplier=settings.max_delivery_fee_multiplier,
        )

    def calculate_delivery_cost(
        self, subtotal_after_discount: Decimal, zone: Optional[str], total_weight: Any = 0
    ) -> Decimal:
        """
        Delivery fee for a zone.

        Unknown or absent zones are pickup (free). Orders whose discounted
        subtotal reaches the zone's free-delivery threshold ship free; other
        orders pay the zone fee once per started weight step, capped.
        """
        if not zone or zone not in self.delivery_zone_fees:
            return ZERO

        threshold = self.free_delivery_thresholds.get(zone, self.default_free_delivery_threshold)
        if subtotal_after_discount >= threshold:
            return ZERO

        weight = _to_decimal(total_weight)
        if weight is None or weight < 0:
            weight = ZERO
        steps = math.ceil(weight / self.delivery_weight_step_kg)
        multiplier = min(self.max_delivery_fee_multiplier, max(1, steps))
        return round_currency(self.delivery_zone_fees[zone] * multiplier)

    def calculate_total(
        self,
        subtotal: Any,
        coupon_percentage: Optional[Any] = None,
        coupon_present: bool = False,
        is_new_user: bool = False,
        delivery_zone: Optional[str] = None,
        total_weight: Any = 0,
    ) -> OrderTotal:
        """Full price breakdown for a subtotal and its discount/delivery context"""
        subtotal_before = _to_decimal(subtotal)
        if subtotal_before is None or subtotal_before < 0:
            raise ValueError(f"Subtotal must be a finite non-negative number: {subtotal!r}")
        subtotal_before = round_currency(subtotal_before)

        selection = select_discount(
            subtotal_before,
            coupon_percentage,
            self.new_user_discount_percentage if is_new_user else None,
            coupon_present,
        )
        subtotal_after = subtotal_before - selection.amount
        tax = calculate_tax(subtotal_after, self.vat_rate)
        delivery = self.calculate_delivery_cost(subtotal_after, delivery_zone, total_weight)

        return OrderTotal(
            subtotal_before_discount=subtotal_before,
            discount_amount=selection.amount,
            discount_type=selection.discount_type,
            subtotal_after_discount=subtotal_after,
            tax=tax,
            delivery_cost=delivery,
            total=subtotal_after + tax + delivery,
            discount_percentage=selection.percentage,
        )

    def validate_amount(self, total: Any) -> AmountValidation:
        """Check a total is a chargeable amount before opening the payment channel"""
        amount = _to_decimal(total)
        if amount is None or amount <= 0:
            return AmountValidation(False, INVALID_TOTAL_REASON)
        if amount < self.min_payment_amount:
            return AmountValidation(False, TOTAL_TOO_LOW_REASON)
        if amount > self.max_payment_amount:
            return AmountValidation(False, TOTAL_TOO_HIGH_REASON)
        return AmountValidation(True)

    def amounts_match(self, expected: Any, actual: Any) -> bool:
        """Exact equality after rounding both sides to cents"""
        left, right = _to_decimal(expected), _to_decimal(actual)
        if left is None or right is None:
            return False
        return round_currency(left) == round_currency(right)


DEFAULT_POLICY = PricingPolicy(
    delivery_zone_fees={"telaviv_north": 65, "jerusalem": 85, "south": 85, "westbank": 85},
    free_delivery_thresholds={"westbank": 1500},
)


def validate_amount(total: Any) -> AmountValidation:
    """validate_amount against the default bounds [1, 100000]"""
    return DEFAULT_POLICY.validate_amount(total)


def calculate_delivery_cost(subtotal_after_discount: Any, zone: Optional[str], total_weight: Any = 0) -> Decimal:
    """calculate_delivery_cost with the default zone table"""
    return DEFAULT_POLICY.calculate_delivery_cost(
        round_currency(subtotal_after_discount), zone, total_weight
    )
