"""
Delivery Address value object
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from src.infrastructure.utilities.constants import DeliveryTypes


@dataclass(frozen=True)
class DeliveryAddress:
    """Shipping address required for home-delivery orders"""

    street: str
    city: str
    zip_code: str
    apartment: Optional[str] = None

    def __post_init__(self):
        """Validate delivery address"""
        for name in ("street", "city", "zip_code"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Delivery address {name} cannot be empty")
            object.__setattr__(self, name, value.strip())

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "DeliveryAddress":
        """Build from the request shape {street, city, zipCode, apartment?}"""
        if not isinstance(data, Mapping):
            raise ValueError("Shipping address is required for delivery orders")
        missing = [key for key in DeliveryTypes.REQUIRED_ADDRESS_FIELDS if not str(data.get(key) or "").strip()]
        if missing:
            raise ValueError(f"Shipping address is missing: {', '.join(missing)}")
        return cls(
            street=str(data["street"]),
            city=str(data["city"]),
            zip_code=str(data["zipCode"]),
            apartment=data.get("apartment") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "street": self.street,
            "city": self.city,
            "zipCode": self.zip_code,
            "apartment": self.apartment,
        }

    def __str__(self) -> str:
        return f"{self.street}, {self.city} {self.zip_code}"
