"""
Master -> worker HTTP calls.

Every call authenticates with the target worker's shared secret in the
X-API-Key header and is bounded by the configured timeout.
"""

import httpx

from wgmesh.db.worker import Worker
from wgmesh.master.config import config
from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)

# Optional transport override (tests route calls to in-process fakes)
transport: httpx.AsyncBaseTransport | None = None


def set_transport(new_transport: httpx.AsyncBaseTransport | None) -> None:
    """Replace the transport used for outgoing worker calls."""
    global transport
    transport = new_transport


def _make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=config.WORKER_REQUEST_TIMEOUT,
        transport=transport,
    )


def _headers(worker: Worker) -> dict[str, str]:
    return {"X-API-Key": worker.api_key}


# =============================================================================
# Mesh Operations
# =============================================================================


async def create_interface(worker: Worker, iface: str, listen_port: int) -> httpx.Response:
    """
    Ask a worker to (re)write and bring up its tunnel interface.

    Raises:
        httpx.RequestError: On transport failure or timeout.
    """
    payload = {
        "iface": iface,
        "private_key": worker.private_key,
        "listen_port": listen_port,
        "address": worker.cidr,
    }
    url = f"{worker.api_url}/api/wg/interface"
    logger.info(f"Create interface {iface} on '{worker.name}' -> {url}")

    async with _make_client() as client:
        return await client.post(url, json=payload, headers=_headers(worker))


async def add_peer(
    target: Worker,
    peer: Worker,
    iface: str,
    listen_port: int,
) -> httpx.Response:
    """
    Ask ``target`` to add ``peer`` to its interface.

    Raises:
        httpx.RequestError: On transport failure or timeout.
    """
    payload = {
        "iface": iface,
        "public_key": peer.public_key,
        "allowed_ips": peer.cidr,
        "endpoint": peer.endpoint(listen_port),
    }
    url = f"{target.api_url}/api/wg/peer"
    logger.info(f"Add peer '{peer.name}' ({peer.cidr}) on '{target.name}' -> {url}")

    async with _make_client() as client:
        return await client.post(url, json=payload, headers=_headers(target))


# =============================================================================
# Status
# =============================================================================


async def get_status(worker: Worker) -> httpx.Response:
    """
    Fetch ``wg show`` output from a worker.

    Raises:
        httpx.RequestError: On transport failure or timeout.
    """
    url = f"{worker.api_url}/api/wg/status"
    logger.info(f"Proxying status request to {url}")

    async with _make_client() as client:
        return await client.get(url, headers=_headers(worker))
