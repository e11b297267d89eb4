"""
Worker Management Endpoints.

Handles worker enrollment, listing, and status proxying. Enrollment answers
as soon as the worker is persisted; the mesh fan-out runs afterwards as a
background task.
"""

import re

import httpx
from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from fastapi.responses import Response

from wgmesh.master.services import enrollment, registry, worker_client
from wgmesh.master.services.allocator import PoolExhausted
from wgmesh.master.services.registry import StorePersistFailure, WorkerNotFound
from wgmesh.models.requests import (
    ErrorResponse,
    WorkerCreateRequest,
    WorkerCreateResponse,
    WorkerResponse,
)
from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()

# Decimal only, as stored in a signed 64-bit SQLite INTEGER
_ID_RE = re.compile(r"[+-]?[0-9]+")
_ID_MIN = -(2**63)
_ID_MAX = 2**63 - 1


def _parse_worker_id(raw_id: str) -> int | None:
    if not _ID_RE.fullmatch(raw_id):
        return None
    value = int(raw_id)
    if not _ID_MIN <= value <= _ID_MAX:
        return None
    return value


# =============================================================================
# Enrollment
# =============================================================================


@router.post(
    "/workers",
    status_code=201,
    response_model=WorkerCreateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_worker(
    request: WorkerCreateRequest,
    http_request: Request,
    background_tasks: BackgroundTasks,
):
    """
    Enroll a new worker.

    Generates its key pair, allocates an overlay address and persists it,
    then schedules the mesh fan-out.
    """
    client_host = http_request.client.host if http_request.client else "unknown"
    logger.info(
        f"POST /api/workers from {client_host}: name={request.name} "
        f"ip={request.ip}:{request.port}"
    )

    try:
        worker = await enrollment.register_worker(
            name=request.name,
            ip=request.ip,
            port=request.port,
            api_key=request.api_key,
            private_key=request.private_key,
            public_key=request.public_key,
        )
    except PoolExhausted as e:
        logger.error(f"allocate address failed: {e}")
        raise HTTPException(status_code=500, detail="address allocation failed")
    except StorePersistFailure:
        raise HTTPException(status_code=500, detail="db insert failed")

    # Do not block the admin on the mesh setup
    background_tasks.add_task(enrollment.run_fanout, worker)

    return WorkerCreateResponse(
        id=worker.id,
        cidr=worker.cidr,
        message=f"created id={worker.id}",
    )


# =============================================================================
# Listing
# =============================================================================


@router.get("/workers", response_model=list[WorkerResponse])
async def list_workers():
    """Return every worker in ascending id order, keys included."""
    workers = registry.list_workers()
    logger.info(f"Returning {len(workers)} workers")
    return [WorkerResponse(**w.to_dict()) for w in workers]


# =============================================================================
# Status Proxy
# =============================================================================


@router.get(
    "/workers/status",
    responses={
        200: {"content": {"text/plain": {}}},
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def worker_status(
    raw_id: str | None = Query(None, alias="id", description="Worker id"),
):
    """
    Relay a worker's ``wg show`` output.

    The worker's status code and body are passed through unchanged.
    """
    if not raw_id:
        logger.warning("Missing id in status request")
        raise HTTPException(status_code=400, detail="missing id")

    worker_id = _parse_worker_id(raw_id)
    if worker_id is None:
        logger.warning(f"Invalid id in status request: {raw_id!r}")
        raise HTTPException(status_code=400, detail="invalid id")

    try:
        worker = registry.get_worker(worker_id)
    except WorkerNotFound:
        logger.warning(f"Worker not found id={worker_id}")
        raise HTTPException(status_code=404, detail="worker not found")

    try:
        response = await worker_client.get_status(worker)
    except (httpx.RequestError, httpx.InvalidURL) as e:
        logger.error(f"Worker status request failed: {e!r}")
        raise HTTPException(status_code=502, detail=f"request failed: {e}")

    logger.info(
        f"Worker status response status={response.status_code} "
        f"len={len(response.content)}"
    )
    return Response(
        content=response.content,
        status_code=response.status_code,
        media_type=response.headers.get("content-type", "text/plain"),
    )
