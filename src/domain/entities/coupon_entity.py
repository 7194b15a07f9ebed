"""
Coupon Entity - percentage discount code
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Optional

UNLIMITED_USES = -1


@dataclass
class Coupon:
    """Discount code stored server-side"""

    code: str
    discount_percentage: Decimal
    is_active: bool = True
    expires_at: Optional[datetime] = None
    uses_left: int = UNLIMITED_USES

    def __post_init__(self):
        self.code = self.code.strip().upper()
        if not Decimal("0") <= self.discount_percentage <= Decimal("100"):
            raise ValueError("Coupon percentage must be within [0, 100]")
        if self.expires_at is not None and self.expires_at.tzinfo is None:
            self.expires_at = self.expires_at.replace(tzinfo=UTC)

    def rejection_reason(self, now: Optional[datetime] = None) -> Optional[str]:
        """Why the coupon cannot be applied right now, or None when it can"""
        if not self.is_active:
            return "Coupon is not active"
        if self.expires_at is not None and self.expires_at <= (now or datetime.now(UTC)):
            return "Coupon has expired"
        if self.uses_left == 0:
            return "Coupon has no uses left"
        return None

    def is_usable(self, now: Optional[datetime] = None) -> bool:
        return self.rejection_reason(now) is None

    def consume(self):
        """Record one use against a limited coupon"""
        if self.uses_left == UNLIMITED_USES:
            return
        if self.uses_left <= 0:
            raise ValueError("Coupon has no uses left")
        self.uses_left -= 1
