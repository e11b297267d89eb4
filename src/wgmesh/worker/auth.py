"""
Worker authentication.

Write endpoints require the X-API-Key header to match the worker's shared
secret. The comparison ignores case. The check runs before the request
body is read, so an unauthenticated caller gets 401 whatever it sends.
"""

from fastapi import HTTPException, Request, status

from wgmesh.utils.logger import get_logger
from wgmesh.worker.config import config

logger = get_logger(__name__)

API_KEY_HEADER = "X-API-Key"


def api_key_matches(provided: str | None, expected: str) -> bool:
    """Check a presented key against the configured one."""
    if not provided or not expected:
        return False
    return provided.casefold() == expected.casefold()


def require_api_key(request: Request) -> None:
    """Reject the request with 401 unless X-API-Key is valid."""
    provided = request.headers.get(API_KEY_HEADER)
    if api_key_matches(provided, config.API_KEY):
        return

    logger.warning(
        f"Auth failed for {request.method} {request.url.path} "
        f"(X-API-Key present={bool(provided)})"
    )
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="unauthorized",
    )
