"""
SQLAlchemy implementation of FailedOrderRepository
"""

import logging
from decimal import Decimal
from typing import Optional

from src.domain.entities.failed_order import FailedOrder as DomainFailedOrder
from src.domain.repositories.failed_order_repository import FailedOrderRepository
from src.infrastructure.database.models import FailedOrder as SQLFailedOrder
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session
from src.infrastructure.utilities.exceptions import FailedOrderNotFoundError


class SQLAlchemyFailedOrderRepository(FailedOrderRepository):
    """Append-mostly audit log stored in the failed_orders table"""

    def __init__(self, db_manager: DatabaseManager | None = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def add(self, failed_order: DomainFailedOrder) -> DomainFailedOrder:
        with managed_session(self._db_manager) as session:
            sql_failed = SQLFailedOrder(
                transaction_id=failed_order.transaction_id,
                order_data=failed_order.order_data,
                error=failed_order.error,
                error_details=failed_order.error_details or None,
                user_id=failed_order.user_id,
                user_email=failed_order.user_email,
                user_name=failed_order.user_name,
                amount=Decimal(str(failed_order.amount)),
                status=failed_order.status,
                comment=failed_order.comment,
            )
            session.add(sql_failed)
            session.flush()
            session.refresh(sql_failed)

            self._logger.warning(
                "⚠️ FAILED ORDER LOGGED: id=%s transaction=%s error=%s",
                sql_failed.id, sql_failed.transaction_id, sql_failed.error,
            )
            return self._map_to_domain(sql_failed)

    async def get_by_id(self, failed_order_id: int) -> Optional[DomainFailedOrder]:
        with managed_session(self._db_manager) as session:
            sql_failed = session.get(SQLFailedOrder, failed_order_id)
            return self._map_to_domain(sql_failed) if sql_failed else None

    async def list(self, status: Optional[str] = None, limit: int = 200) -> list[DomainFailedOrder]:
        with managed_session(self._db_manager) as session:
            query = session.query(SQLFailedOrder)
            if status:
                query = query.filter(SQLFailedOrder.status == status)
            rows = (
                query.order_by(SQLFailedOrder.created_at.desc(), SQLFailedOrder.id.desc())
                .limit(limit)
                .all()
            )
            return [self._map_to_domain(row) for row in rows]

    async def update(self, failed_order: DomainFailedOrder) -> DomainFailedOrder:
        with managed_session(self._db_manager) as session:
            sql_failed = session.get(SQLFailedOrder, failed_order.id)
            if sql_failed is None:
                raise FailedOrderNotFoundError(failed_order.id)
            sql_failed.status = failed_order.status
            sql_failed.comment = failed_order.comment
            session.flush()
            session.refresh(sql_failed)
            return self._map_to_domain(sql_failed)

    @staticmethod
    def _map_to_domain(sql_failed: SQLFailedOrder) -> DomainFailedOrder:
        return DomainFailedOrder(
            id=sql_failed.id,
            transaction_id=sql_failed.transaction_id,
            order_data=sql_failed.order_data or {},
            error=sql_failed.error,
            error_details=sql_failed.error_details or {},
            user_id=sql_failed.user_id,
            user_email=sql_failed.user_email,
            user_name=sql_failed.user_name,
            status=sql_failed.status,
            comment=sql_failed.comment or "",
            created_at=sql_failed.created_at,
            updated_at=sql_failed.updated_at,
        )
