"""
Order repository interface

Defines the contract for order data access operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.order_entity import Order


class OrderRepository(ABC):
    """Repository interface for order operations"""

    @abstractmethod
    async def create_order(self, order: Order) -> Order:
        """Persist a new order and return it with its ID"""

    @abstractmethod
    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID"""

    @abstractmethod
    async def get_orders_by_user(self, user_id: str) -> List[Order]:
        """Get orders placed by a user, newest first"""
