"""
Logging Infrastructure

Structured logging, security event tracking and performance timing.
"""

from .logging_config import (
    PerformanceLogger,
    ProductionLogger,
    SecurityLogger,
    get_structured_logger,
    security_logger,
)

__all__ = [
    "PerformanceLogger",
    "ProductionLogger",
    "SecurityLogger",
    "get_structured_logger",
    "security_logger",
]
