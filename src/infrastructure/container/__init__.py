"""
Dependency injection
"""
