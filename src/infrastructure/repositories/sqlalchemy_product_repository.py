"""
SQLAlchemy implementation of ProductRepository
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable

from src.domain.entities.product_entity import Product as DomainProduct
from src.domain.repositories.product_repository import ProductRepository
from src.domain.value_objects.multilingual_text import MultilingualText, PlainText, to_content
from src.infrastructure.database.models import Product as SQLProduct
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session

logger = logging.getLogger(__name__)


def _content_to_column(content):
    """Tagged content back to the raw JSON column value"""
    if isinstance(content, PlainText):
        return content.value
    if isinstance(content, MultilingualText):
        return content.to_dict()
    return content


class SQLAlchemyProductRepository(ProductRepository):
    """SQLAlchemy implementation of product repository"""

    def __init__(self, db_manager: DatabaseManager | None = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def find_by_id(self, product_id: str) -> DomainProduct | None:
        """Find product by ID"""
        with managed_session(self._db_manager) as session:
            sql_product = session.get(SQLProduct, str(product_id))
            return self._map_to_domain(sql_product) if sql_product else None

    async def find_by_ids(self, product_ids: Iterable[str]) -> Dict[str, DomainProduct]:
        """Find products by IDs in a single query"""
        ids = {str(product_id) for product_id in product_ids}
        if not ids:
            return {}
        with managed_session(self._db_manager) as session:
            rows = session.query(SQLProduct).filter(SQLProduct.id.in_(ids)).all()
            return {row.id: self._map_to_domain(row) for row in rows}

    async def find_all_active(self) -> list[DomainProduct]:
        """Find all active products"""
        with managed_session(self._db_manager) as session:
            rows = (
                session.query(SQLProduct)
                .filter(SQLProduct.is_active.is_(True))
                .order_by(SQLProduct.id)
                .all()
            )
            return [self._map_to_domain(row) for row in rows]

    async def save(self, product: DomainProduct) -> DomainProduct:
        """Save product to database"""
        with managed_session(self._db_manager) as session:
            sql_product = session.get(SQLProduct, product.id)
            if sql_product is None:
                sql_product = SQLProduct(id=product.id)
                session.add(sql_product)

            sql_product.name = _content_to_column(product.name)
            sql_product.description = _content_to_column(product.description)
            sql_product.price = product.price
            sql_product.sale = product.sale
            sql_product.sale_price = product.sale_price
            sql_product.is_active = product.is_active

            session.flush()
            session.refresh(sql_product)
            return self._map_to_domain(sql_product)

    @staticmethod
    def _map_to_domain(sql_product: SQLProduct) -> DomainProduct:
        """Map SQLAlchemy model to domain entity, tagging translatable fields"""
        return DomainProduct(
            id=sql_product.id,
            name=to_content(sql_product.name),
            description=to_content(sql_product.description),
            price=Decimal(sql_product.price),
            sale=bool(sql_product.sale),
            sale_price=Decimal(sql_product.sale_price) if sql_product.sale_price is not None else None,
            is_active=sql_product.is_active,
            created_at=sql_product.created_at,
        )
