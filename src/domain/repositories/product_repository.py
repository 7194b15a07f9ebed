"""
Product repository interface

Defines the contract for product data access operations.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from src.domain.entities.product_entity import Product


class ProductRepository(ABC):
    """Repository interface for product operations"""

    @abstractmethod
    async def find_by_id(self, product_id: str) -> Optional[Product]:
        """Find product by ID"""

    @abstractmethod
    async def find_by_ids(self, product_ids: Iterable[str]) -> Dict[str, Product]:
        """Find several products at once, keyed by ID; unknown IDs are absent"""

    @abstractmethod
    async def find_all_active(self) -> List[Product]:
        """Find all active products"""

    @abstractmethod
    async def save(self, product: Product) -> Product:
        """Save product"""
