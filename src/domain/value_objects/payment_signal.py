"""
Payment signal value object

Normalized form of the asynchronous events the hosted payment page emits
(window messages or success/failure redirects).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class PaymentSignalKind(str, Enum):
    """What the payment provider reported"""

    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"
    LOADED = "loaded"


@dataclass(frozen=True)
class PaymentSignal:
    """Provider event with the transaction reference under a single name"""

    kind: PaymentSignalKind
    transaction_id: Optional[str] = None
    amount: Optional[float] = None
    message: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_success(self) -> bool:
        return self.kind is PaymentSignalKind.SUCCESS
