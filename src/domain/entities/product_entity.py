"""
Product Entity - catalog item priced by the storefront
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from src.domain.value_objects.multilingual_text import DEFAULT_LANGUAGE, Content, resolve


@dataclass
class Product:
    """Product domain entity"""

    id: str
    name: Optional[Content]
    price: Decimal
    description: Optional[Content] = None
    sale: bool = False
    sale_price: Optional[Decimal] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate the product after initialization"""
        if self.price < 0:
            raise ValueError("Product price cannot be negative")

    @property
    def effective_price(self) -> Decimal:
        """Sale price while the product is on sale with a positive sale price"""
        if self.sale and self.sale_price is not None and self.sale_price > 0:
            return self.sale_price
        return self.price

    def display_name(self, language: str = DEFAULT_LANGUAGE) -> str:
        return resolve(self.name, language)

    def display_description(self, language: str = DEFAULT_LANGUAGE) -> str:
        return resolve(self.description, language)

    def to_dict(self, language: str = DEFAULT_LANGUAGE) -> Dict[str, Any]:
        """Catalog representation with text resolved for `language`"""
        return {
            "id": self.id,
            "name": self.display_name(language),
            "description": self.display_description(language),
            "price": float(self.price),
            "sale": self.sale,
            "salePrice": float(self.sale_price) if self.sale_price is not None else None,
            "effectivePrice": float(self.effective_price),
        }
