"""
HTTP API

FastAPI routers, request schemas and dependencies.
"""
