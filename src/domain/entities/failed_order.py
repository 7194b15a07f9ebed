"""
Failed Order Entity - audit record for a checkout that ended abnormally
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from src.infrastructure.utilities.constants import FailedOrderStatus, PaymentSettings


def synthesize_transaction_id(reason: str = PaymentSettings.UNKNOWN_REASON, now: Optional[datetime] = None) -> str:
    """Build a traceable placeholder id of the form <REASON>-<epoch ms>"""
    moment = now or datetime.now(timezone.utc)
    return f"{reason}-{int(moment.timestamp() * 1000)}"


@dataclass
class FailedOrder:
    """A payment/order flow that needs manual reconciliation"""

    id: Optional[int]
    transaction_id: str
    order_data: Dict[str, Any]
    error: str
    error_details: Dict[str, Any] = field(default_factory=dict)
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    status: str = FailedOrderStatus.PENDING
    comment: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.transaction_id:
            self.transaction_id = synthesize_transaction_id()
        if self.status not in FailedOrderStatus.ALL:
            raise ValueError(f"Unknown failed order status: {self.status}")

    @property
    def amount(self) -> float:
        """Amount the customer was (or may have been) charged"""
        try:
            return float(self.order_data.get("total") or 0)
        except (TypeError, ValueError):
            return 0.0

    def update_status(self, status: str):
        """Move the record through its review states"""
        if status not in FailedOrderStatus.ALL:
            raise ValueError(f"Unknown failed order status: {status}")
        self.status = status
        self.updated_at = datetime.now(timezone.utc)

    def update_comment(self, comment: str):
        """Attach a reviewer note"""
        self.comment = comment.strip()
        self.updated_at = datetime.now(timezone.utc)

    def matches(self, query: str) -> bool:
        """Case-insensitive search over the fields reviewers look up"""
        needle = query.strip().lower()
        if not needle:
            return True
        haystack = (self.transaction_id, self.user_email, self.user_name, self.comment)
        return any(value and needle in value.lower() for value in haystack)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "transactionId": self.transaction_id,
            "orderData": self.order_data,
            "error": self.error,
            "errorDetails": self.error_details,
            "userId": self.user_id,
            "userEmail": self.user_email,
            "userName": self.user_name,
            "amount": self.amount,
            "status": self.status,
            "comment": self.comment,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
