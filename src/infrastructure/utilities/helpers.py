"""
Utility functions for the Kingsman storefront backend
"""

import secrets
import string
import time
from typing import Any, Optional

_REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits


def epoch_millis() -> int:
    """Current time in milliseconds since the epoch"""
    return int(time.time() * 1000)


def generate_request_id(prefix: str) -> str:
    """Correlation id such as CALC-1718000000000-k3j9x0q1a"""
    suffix = "".join(secrets.choice(_REQUEST_ID_ALPHABET) for _ in range(9))
    return f"{prefix}-{epoch_millis()}-{suffix}"


def sanitize_text(text: Optional[str], max_length: int = 500) -> str:
    """Strip control characters and cap length of free-text input"""
    if not text:
        return ""

    sanitized = "".join(char for char in text if ord(char) >= 32 or char in "\n\t")
    return sanitized.strip()[:max_length]
