"""Coupon code value object"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CouponCode:
    """Customer-entered discount code, compared case-insensitively"""

    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValueError("Coupon code must be a string")
        normalized = self.value.strip().upper()
        if not normalized:
            raise ValueError("Coupon code cannot be empty")
        object.__setattr__(self, "value", normalized)

    @classmethod
    def parse(cls, raw: Any) -> Optional["CouponCode"]:
        """Return a CouponCode, or None when the input is absent or blank"""
        if not isinstance(raw, str) or not raw.strip():
            return None
        return cls(raw)

    def __str__(self) -> str:
        return self.value
