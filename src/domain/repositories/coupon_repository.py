"""
Coupon repository interface
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.coupon_entity import Coupon


class CouponRepository(ABC):
    """Repository interface for coupon operations"""

    @abstractmethod
    async def find_by_code(self, code: str) -> Optional[Coupon]:
        """Find a coupon by its (case-insensitive) code"""

    @abstractmethod
    async def save(self, coupon: Coupon) -> Coupon:
        """Save coupon"""

    @abstractmethod
    async def mark_used(self, code: str, user_id: str) -> bool:
        """Consume one use of the coupon and record it against the user"""

    @abstractmethod
    async def has_user_used(self, code: str, user_id: str) -> bool:
        """Whether the user already redeemed the coupon"""
