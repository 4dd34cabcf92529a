"""Middleware modules"""

from oidc_provider.middleware.logging import StructuredLoggingMiddleware

__all__ = ["StructuredLoggingMiddleware"]
