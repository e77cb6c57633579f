"""Authentication middleware for API key validation."""

import re
import secrets
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status

from ...config import config
from ...utils.logging import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = re.compile(r"^bearer\s+", re.IGNORECASE)


class AuthMiddleware:
    """
    Static API key check for the generation endpoints.

    The key is taken from ``x-api-key`` or ``Authorization`` (with or
    without a ``Bearer`` prefix). When no key is configured every request
    passes.
    """

    def __init__(self, api_key: Optional[str] = None):
        self._api_key = api_key

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key if self._api_key is not None else config.API_KEY

    @staticmethod
    def extract_key(request: Request) -> str:
        """Return the presented key, or an empty string."""
        raw = request.headers.get("x-api-key") or request.headers.get("authorization") or ""
        return BEARER_PREFIX.sub("", raw).strip()

    async def verify_api_key(self, request: Request) -> Dict[str, Any]:
        """
        Verify the API key of a request.

        Args:
            request: FastAPI request object

        Returns:
            Authentication context dictionary

        Raises:
            HTTPException: 401 if a key is configured and does not match
        """
        expected = self.api_key
        if not expected:
            return {"authenticated": False, "reason": "auth_disabled"}

        presented = self.extract_key(request)
        if not presented or not secrets.compare_digest(
            presented.encode("utf-8"), expected.encode("utf-8")
        ):
            client = request.client.host if request.client else "unknown"
            logger.warning(f"Rejected request to {request.url.path} from {client}")
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

        return {"authenticated": True}


# Global auth middleware instance
auth_middleware = AuthMiddleware()


async def verify_api_key(request: Request) -> Dict[str, Any]:
    """
    Dependency function for route authentication.

    Usage in routes:
        @router.post("/endpoint")
        async def endpoint(auth: dict = Depends(verify_api_key)):
            pass
    """
    return await auth_middleware.verify_api_key(request)
