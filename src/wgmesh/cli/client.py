"""
API client for CLI commands.

Provides functions to interact with the master admin API.
Returns structured data instead of printing.
"""

import httpx

from wgmesh.cli import config as cli_config
from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)


class APIError(Exception):
    """API request error with status code and detail."""

    def __init__(
        self, message: str, status_code: int | None = None, detail: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _get_master_url() -> str:
    """Get the master API URL from config."""
    return f"http://{cli_config.MASTER_ADDRESS}:{cli_config.MASTER_PORT}/api"


def _handle_http_error(e: httpx.HTTPStatusError, context: str = "request") -> None:
    """Handle HTTP errors with consistent logging."""
    status = e.response.status_code
    try:
        detail = e.response.json()
        detail_str = detail.get("detail", str(detail))
    except ValueError:
        detail_str = e.response.text.strip()

    logger.debug(f"HTTP {status} on {context}: {detail_str}")
    raise APIError(
        f"HTTP {status}: {detail_str}", status_code=status, detail=detail_str
    )


# =============================================================================
# Worker Operations
# =============================================================================


def get_workers() -> list[dict]:
    """Get all enrolled workers."""
    url = f"{_get_master_url()}/workers"
    try:
        response = httpx.get(url, timeout=cli_config.REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json() or []
    except httpx.HTTPStatusError as e:
        _handle_http_error(e, "get workers")
    except httpx.RequestError as e:
        raise APIError(f"Network error: {e}")
    return []


def add_worker(
    name: str,
    ip: str,
    port: int,
    api_key: str,
    private_key: str = "",
    public_key: str = "",
) -> dict:
    """Enroll a worker; returns the master's response (id, cidr)."""
    url = f"{_get_master_url()}/workers"
    payload = {"name": name, "ip": ip, "port": port, "api_key": api_key}
    if private_key and public_key:
        payload["private_key"] = private_key
        payload["public_key"] = public_key

    try:
        response = httpx.post(url, json=payload, timeout=cli_config.REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        _handle_http_error(e, "add worker")
    except httpx.RequestError as e:
        raise APIError(f"Network error: {e}")
    return {}


def get_worker_status(worker_id: int) -> str:
    """Get the proxied ``wg show`` output of a worker."""
    url = f"{_get_master_url()}/workers/status"
    try:
        response = httpx.get(
            url, params={"id": worker_id}, timeout=cli_config.REQUEST_TIMEOUT
        )
        response.raise_for_status()
        return response.text
    except httpx.HTTPStatusError as e:
        _handle_http_error(e, "worker status")
    except httpx.RequestError as e:
        raise APIError(f"Network error: {e}")
    return ""
