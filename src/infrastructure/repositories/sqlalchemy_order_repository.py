"""
SQLAlchemy Order Repository

Concrete implementation of OrderRepository using SQLAlchemy ORM.
"""

import logging
from decimal import Decimal

from src.domain.entities.order_entity import Order as DomainOrder
from src.domain.entities.order_entity import OrderItem as DomainOrderItem
from src.domain.entities.order_total import DiscountType, OrderTotal
from src.domain.repositories.order_repository import OrderRepository
from src.infrastructure.database.models import Customer, Order, OrderItem
from src.infrastructure.database.operations import DatabaseManager
from src.infrastructure.repositories.session_handler import managed_session


class SQLAlchemyOrderRepository(OrderRepository):
    """SQLAlchemy implementation of OrderRepository"""

    def __init__(self, db_manager: DatabaseManager | None = None):
        self._db_manager = db_manager
        self._logger = logging.getLogger(self.__class__.__name__)

    async def create_order(self, order: DomainOrder) -> DomainOrder:
        """Create a new order with its items in one transaction"""
        self._logger.info("📝 CREATE ORDER: Customer %s", order.user_id)

        with managed_session(self._db_manager) as session:
            if session.get(Customer, order.user_id) is None:
                session.add(Customer(uid=order.user_id, email=order.user_email))

            totals = order.totals
            sql_order = Order(
                user_id=order.user_id,
                user_email=order.user_email,
                subtotal_before_discount=totals.subtotal_before_discount,
                discount_amount=totals.discount_amount,
                discount_percentage=totals.discount_percentage,
                discount_type=totals.discount_type.value,
                subtotal=totals.subtotal_after_discount,
                tax=totals.tax,
                delivery_cost=totals.delivery_cost,
                total=totals.total,
                coupon_code=order.coupon_code,
                transaction_id=order.transaction_id,
                payment_method=order.payment_method,
                delivery_type=order.delivery_type,
                delivery_zone=order.delivery_zone,
                shipping_address=order.shipping_address,
                phone=order.phone,
                notes=order.notes,
                language=order.language,
                status=order.status,
            )
            sql_order.items = [
                OrderItem(
                    product_id=item.product_id,
                    product_name=item.name,
                    quantity=item.quantity,
                    unit_price=item.price,
                    options=item.options or None,
                )
                for item in order.items
            ]
            session.add(sql_order)
            session.flush()
            session.refresh(sql_order)

            self._logger.info("🆕 ORDER CREATED: ID=%s total=%s", sql_order.id, sql_order.total)
            return self._map_to_domain(sql_order)

    async def get_order_by_id(self, order_id: int) -> DomainOrder | None:
        """Get order by ID"""
        with managed_session(self._db_manager) as session:
            sql_order = session.get(Order, order_id)
            return self._map_to_domain(sql_order) if sql_order else None

    async def get_orders_by_user(self, user_id: str) -> list[DomainOrder]:
        """Get orders placed by a user, newest first"""
        with managed_session(self._db_manager) as session:
            rows = (
                session.query(Order)
                .filter(Order.user_id == user_id)
                .order_by(Order.created_at.desc(), Order.id.desc())
                .all()
            )
            return [self._map_to_domain(row) for row in rows]

    @staticmethod
    def _map_to_domain(sql_order: Order) -> DomainOrder:
        totals = OrderTotal(
            subtotal_before_discount=Decimal(sql_order.subtotal_before_discount),
            discount_amount=Decimal(sql_order.discount_amount),
            discount_type=DiscountType(sql_order.discount_type),
            subtotal_after_discount=Decimal(sql_order.subtotal),
            tax=Decimal(sql_order.tax),
            delivery_cost=Decimal(sql_order.delivery_cost),
            total=Decimal(sql_order.total),
            discount_percentage=Decimal(sql_order.discount_percentage),
        )
        return DomainOrder(
            id=sql_order.id,
            user_id=sql_order.user_id,
            user_email=sql_order.user_email,
            items=[
                DomainOrderItem(
                    name=item.product_name,
                    price=Decimal(item.unit_price),
                    quantity=item.quantity,
                    product_id=item.product_id,
                    options=item.options or {},
                )
                for item in sql_order.items
            ],
            totals=totals,
            coupon_code=sql_order.coupon_code,
            transaction_id=sql_order.transaction_id,
            payment_method=sql_order.payment_method,
            delivery_type=sql_order.delivery_type,
            delivery_zone=sql_order.delivery_zone,
            shipping_address=sql_order.shipping_address,
            phone=sql_order.phone,
            notes=sql_order.notes,
            language=sql_order.language,
            status=sql_order.status,
            created_at=sql_order.created_at,
        )
