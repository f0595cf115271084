"""Core session primitives (engine events).

Kept free of FastAPI concerns so it can be reused by API routes, CLI, and tests.
"""
