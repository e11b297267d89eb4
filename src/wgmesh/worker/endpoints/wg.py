"""
WireGuard endpoints.

Handles interface creation, peer addition, and status requests from the
master. Write endpoints check the API key before reading the body, and are
serialized per interface.
"""

import re

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse

from wgmesh.models.requests import (
    ErrorResponse,
    InterfaceRequest,
    MessageResponse,
    PeerRequest,
)
from wgmesh.utils.http import parse_json_body
from wgmesh.utils.logger import get_logger
from wgmesh.utils.wireguard import mask_key
from wgmesh.worker.auth import require_api_key
from wgmesh.worker.config import config
from wgmesh.worker.services import conf_file, driver
from wgmesh.worker.services.locks import interface_locks

logger = get_logger(__name__)
router = APIRouter()

# Kernel interface names are at most 15 bytes; wg-quick accepts this charset
_IFACE_RE = re.compile(r"^[a-zA-Z0-9_=+.-]{1,15}$")


def _check_fields(missing: list[str], context: str) -> None:
    if missing:
        logger.warning(f"Missing fields in {context}: {', '.join(missing)}")
        raise HTTPException(status_code=400, detail="missing fields")


def _check_iface(iface: str) -> None:
    if not _IFACE_RE.match(iface):
        logger.warning(f"Rejected interface name {iface!r}")
        raise HTTPException(status_code=400, detail="invalid interface name")


# =============================================================================
# Interface Creation
# =============================================================================


@router.post(
    "/wg/interface",
    status_code=201,
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_interface(http_request: Request):
    """
    Write the interface config and bring the interface up.

    Existing ``[Peer]`` blocks in the file are kept verbatim.
    """
    require_api_key(http_request)
    request = await parse_json_body(http_request, InterfaceRequest)

    logger.info(
        f"Interface request iface={request.iface} address={request.address} "
        f"listen={request.listen_port} key={mask_key(request.private_key)}"
    )
    _check_fields(request.missing_fields(), "interface create")
    _check_iface(request.iface)

    path = config.get_conf_path(request.iface)
    async with interface_locks.get(request.iface):
        try:
            conf_file.write_interface(
                path,
                private_key=request.private_key,
                address=request.address,
                listen_port=request.listen_port,
            )
        except OSError as e:
            logger.error(f"Write conf failed for {path}: {e}")
            raise HTTPException(status_code=500, detail="write conf failed")

        await driver.bring_up(request.iface)

    return MessageResponse(message="interface created")


# =============================================================================
# Peer Addition
# =============================================================================


@router.post(
    "/wg/peer",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def add_peer(http_request: Request):
    """
    Add a peer to the live interface and persist it.

    The live change comes first. A peer whose public key is already in the
    config file is not appended again.
    """
    require_api_key(http_request)
    request = await parse_json_body(http_request, PeerRequest)

    logger.info(
        f"Peer request iface={request.iface} pub={request.public_key} "
        f"allowed={request.allowed_ips} endpoint={request.endpoint or '-'}"
    )
    _check_fields(request.missing_fields(), "peer add")
    _check_iface(request.iface)

    path = config.get_conf_path(request.iface)
    async with interface_locks.get(request.iface):
        result = await driver.set_peer(
            request.iface,
            request.public_key,
            request.allowed_ips,
            request.endpoint,
        )
        if not result.ok:
            raise HTTPException(status_code=500, detail="wg set failed")

        if conf_file.has_peer(path, request.public_key):
            logger.info(
                f"Peer {request.public_key} already present in {path}, "
                "skipping append"
            )
            return MessageResponse(message="peer added (already present)")

        try:
            conf_file.append_peer(
                path,
                public_key=request.public_key,
                allowed_ips=request.allowed_ips,
                endpoint=request.endpoint,
            )
        except OSError as e:
            # The peer is live; persistence is advisory
            logger.error(f"Append to {path} failed: {e}")
            return MessageResponse(message="peer added (but conf append failed)")

        await driver.reload(request.iface)

    return MessageResponse(message="peer added")


# =============================================================================
# Status
# =============================================================================


@router.get("/wg/status", response_class=PlainTextResponse)
async def wg_status():
    """Return ``wg show`` output verbatim."""
    result = await driver.show()
    if not result.ok:
        return PlainTextResponse(result.output, status_code=500)
    return PlainTextResponse(result.output)
