"""
SQLAlchemy implementation of CustomerRepository
"""

import logging

from src.domain.entities.customer_entity import Customer as DomainCustomer
from src.domain.repositories.customer_repository import CustomerRepository
from src.infrastructure.database.models import Customer as SQLCustomer
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session

logger = logging.getLogger(__name__)


class SQLAlchemyCustomerRepository(CustomerRepository):
    """SQLAlchemy implementation of customer repository"""

    def __init__(self, db_manager: DatabaseManager | None = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_uid(self, uid: str) -> DomainCustomer | None:
        """Find customer by identity uid"""
        with managed_session(self._db_manager) as session:
            sql_customer = session.get(SQLCustomer, uid)
            if not sql_customer:
                return None
            return self._map_to_domain(sql_customer)

    async def save(self, customer: DomainCustomer) -> DomainCustomer:
        """Save customer to database"""
        with managed_session(self._db_manager) as session:
            sql_customer = session.get(SQLCustomer, customer.uid)
            if sql_customer is None:
                sql_customer = SQLCustomer(uid=customer.uid)
                session.add(sql_customer)
                self._logger.info("Creating customer %s", customer.uid)

            sql_customer.email = customer.email
            sql_customer.display_name = customer.display_name
            if customer.created_at is not None:
                sql_customer.created_at = customer.created_at

            session.flush()
            session.refresh(sql_customer)
            return self._map_to_domain(sql_customer)

    @staticmethod
    def _map_to_domain(sql_customer: SQLCustomer) -> DomainCustomer:
        """Map SQLAlchemy model to domain entity"""
        return DomainCustomer(
            uid=sql_customer.uid,
            email=sql_customer.email,
            display_name=sql_customer.display_name,
            created_at=sql_customer.created_at,
        )
