"""
Checkout states and the transitions allowed between them
"""

from enum import Enum
from typing import Dict, FrozenSet

from src.infrastructure.utilities.exceptions import InvalidStateTransitionError


class CheckoutState(str, Enum):
    """Phase of one checkout attempt"""

    IDLE = "idle"
    CALCULATING = "calculating"
    AWAITING_PAYMENT = "awaiting_payment"
    VERIFYING = "verifying"
    SETTLED = "settled"
    REJECTED = "rejected"


ALLOWED_TRANSITIONS: Dict[CheckoutState, FrozenSet[CheckoutState]] = {
    CheckoutState.IDLE: frozenset({CheckoutState.CALCULATING}),
    CheckoutState.CALCULATING: frozenset({CheckoutState.AWAITING_PAYMENT, CheckoutState.IDLE}),
    CheckoutState.AWAITING_PAYMENT: frozenset(
        {CheckoutState.CALCULATING, CheckoutState.VERIFYING, CheckoutState.IDLE}
    ),
    CheckoutState.VERIFYING: frozenset({CheckoutState.SETTLED, CheckoutState.REJECTED}),
    # Terminal for the attempt; a new attempt starts over
    CheckoutState.SETTLED: frozenset({CheckoutState.IDLE}),
    CheckoutState.REJECTED: frozenset({CheckoutState.CALCULATING, CheckoutState.IDLE}),
}


def can_transition(current: CheckoutState, target: CheckoutState) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: CheckoutState, target: CheckoutState) -> CheckoutState:
    """Return `target` or raise when the move is not allowed"""
    if not can_transition(current, target):
        raise InvalidStateTransitionError(current.value, target.value)
    return target
