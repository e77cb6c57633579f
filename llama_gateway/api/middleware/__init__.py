"""API middleware modules."""

from .auth import auth_middleware, verify_api_key

__all__ = ["auth_middleware", "verify_api_key"]
