"""
Customer domain entity

Represents a storefront account as seen by the pricing rules.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional

# Average month length used for the account-age rule
DAYS_PER_MONTH = 30.44


@dataclass
class Customer:
    """
    Customer domain entity

    Identity comes from the upstream identity provider; only what the
    checkout needs is kept here.
    """

    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.uid or not self.uid.strip():
            raise ValueError("Customer uid cannot be empty")
        if self.created_at is not None and self.created_at.tzinfo is None:
            self.created_at = self.created_at.replace(tzinfo=UTC)

    def account_age(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        """Time since sign-up, None when the creation date is unknown"""
        if self.created_at is None:
            return None
        return (now or datetime.now(UTC)) - self.created_at

    def is_new_user(self, months: int, now: Optional[datetime] = None) -> bool:
        """True while the account is younger than `months` months"""
        age = self.account_age(now)
        if age is None:
            return False
        return age < timedelta(days=months * DAYS_PER_MONTH)

    def __str__(self) -> str:
        return f"Customer(uid={self.uid}, email={self.email})"
