"""
API package - cross-cutting HTTP concerns shared by every blueprint.

This package provides:
- Request ID injection (X-Request-ID)
- Error envelope standardization
- Request logging
"""
