"""
Failed order repository interface
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.failed_order import FailedOrder


class FailedOrderRepository(ABC):
    """Repository interface for the failed-order audit log"""

    @abstractmethod
    async def add(self, failed_order: FailedOrder) -> FailedOrder:
        """Append an audit record and return it with its ID"""

    @abstractmethod
    async def get_by_id(self, failed_order_id: int) -> Optional[FailedOrder]:
        """Get an audit record by ID"""

    @abstractmethod
    async def list(self, status: Optional[str] = None, limit: int = 200) -> List[FailedOrder]:
        """List audit records newest first, optionally filtered by status"""

    @abstractmethod
    async def update(self, failed_order: FailedOrder) -> FailedOrder:
        """Persist status/comment changes of an audit record"""
