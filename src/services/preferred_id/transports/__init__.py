"""
Transport implementations for the preferred-id service.

Supports:
- HTTP/REST (FastAPI)
"""
