"""
Infrastructure Layer

Contains all external dependencies and implementations:
- Database implementations
- Payment provider and HTTP client integrations
- Configuration management
- Logging infrastructure
"""
