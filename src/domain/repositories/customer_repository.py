"""
Customer Repository interface

Defines the contract for customer data access operations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.customer_entity import Customer


class CustomerRepository(ABC):
    """
    Abstract repository interface for Customer entities

    Infrastructure layer provides concrete implementations.
    """

    @abstractmethod
    async def find_by_uid(self, uid: str) -> Optional[Customer]:
        """
        Find a customer by their identity-provider uid

        Args:
            uid: The customer's unique identifier

        Returns:
            The customer if found, None otherwise
        """

    @abstractmethod
    async def save(self, customer: Customer) -> Customer:
        """
        Save or update a customer

        Args:
            customer: The customer entity to save

        Returns:
            The saved customer
        """
