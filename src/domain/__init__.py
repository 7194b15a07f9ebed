"""
Domain Layer

Entities, value objects, repository contracts and pricing rules.
"""
