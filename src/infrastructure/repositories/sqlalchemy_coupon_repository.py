"""
SQLAlchemy implementation of CouponRepository
"""

import logging
from decimal import Decimal

from src.domain.entities.coupon_entity import UNLIMITED_USES
from src.domain.entities.coupon_entity import Coupon as DomainCoupon
from src.domain.repositories.coupon_repository import CouponRepository
from src.infrastructure.database.models import Coupon as SQLCoupon
from src.infrastructure.database.models import CouponUsage
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session

logger = logging.getLogger(__name__)


def _normalize(code: str) -> str:
    return code.strip().upper()


class SQLAlchemyCouponRepository(CouponRepository):
    """SQLAlchemy implementation of coupon repository"""

    def __init__(self, db_manager: DatabaseManager | None = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_code(self, code: str) -> DomainCoupon | None:
        """Find coupon by normalized code"""
        with managed_session(self._db_manager) as session:
            sql_coupon = session.get(SQLCoupon, _normalize(code))
            return self._map_to_domain(sql_coupon) if sql_coupon else None

    async def save(self, coupon: DomainCoupon) -> DomainCoupon:
        """Insert or update a coupon"""
        with managed_session(self._db_manager) as session:
            sql_coupon = session.get(SQLCoupon, coupon.code)
            if sql_coupon is None:
                sql_coupon = SQLCoupon(code=coupon.code)
                session.add(sql_coupon)
            sql_coupon.discount_percentage = coupon.discount_percentage
            sql_coupon.is_active = coupon.is_active
            sql_coupon.expires_at = coupon.expires_at
            sql_coupon.uses_left = coupon.uses_left
            session.flush()
            return self._map_to_domain(sql_coupon)

    async def mark_used(self, code: str, user_id: str) -> bool:
        """Decrement remaining uses and record the redemption"""
        normalized = _normalize(code)
        with managed_session(self._db_manager) as session:
            sql_coupon = session.get(SQLCoupon, normalized)
            if sql_coupon is None:
                self._logger.warning("Tried to consume unknown coupon %s", normalized)
                return False

            if sql_coupon.uses_left != UNLIMITED_USES:
                if sql_coupon.uses_left <= 0:
                    self._logger.warning("Coupon %s has no uses left", normalized)
                    return False
                sql_coupon.uses_left -= 1

            already_recorded = (
                session.query(CouponUsage)
                .filter(CouponUsage.code == normalized, CouponUsage.uid == user_id)
                .first()
            )
            if already_recorded is None:
                session.add(CouponUsage(code=normalized, uid=user_id))

            self._logger.info("Coupon %s used by %s", normalized, user_id)
            return True

    async def has_user_used(self, code: str, user_id: str) -> bool:
        with managed_session(self._db_manager) as session:
            return (
                session.query(CouponUsage)
                .filter(CouponUsage.code == _normalize(code), CouponUsage.uid == user_id)
                .first()
                is not None
            )

    @staticmethod
    def _map_to_domain(sql_coupon: SQLCoupon) -> DomainCoupon:
        return DomainCoupon(
            code=sql_coupon.code,
            discount_percentage=Decimal(sql_coupon.discount_percentage),
            is_active=sql_coupon.is_active,
            expires_at=sql_coupon.expires_at,
            uses_left=sql_coupon.uses_left,
        )
