"""
Worker registry service.

Thin layer over the Worker model providing the registry operations the
master needs. Address allocation and insertion happen under a single lock
so two concurrent enrollments can never be handed the same address.
"""

import asyncio

import peewee

from wgmesh.db.base import db
from wgmesh.db.worker import Worker
from wgmesh.master.services.allocator import allocate_address
from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)

# Serializes (allocate, insert) across concurrent enrollments
_enroll_lock = asyncio.Lock()


class WorkerNotFound(Exception):
    """Raised when a worker id is not in the registry."""

    def __init__(self, worker_id: int):
        super().__init__(f"worker {worker_id} not found")
        self.worker_id = worker_id


class StorePersistFailure(Exception):
    """Raised when a worker row could not be written."""


# =============================================================================
# Registry Operations
# =============================================================================


def insert(draft: dict) -> Worker:
    """
    Persist a worker draft.

    Args:
        draft: Field values for every Worker column except id.

    Returns:
        The saved Worker with its assigned id.

    Raises:
        StorePersistFailure: If the database rejects the insert.
    """
    try:
        with db.atomic():
            return Worker.create(**draft)
    except peewee.PeeweeException as e:
        logger.error(f"db insert failed: {e}")
        raise StorePersistFailure(str(e)) from e


def list_workers() -> list[Worker]:
    """Return all workers ordered by ascending id."""
    return list(Worker.select().order_by(Worker.id))


def get_worker(worker_id: int) -> Worker:
    """
    Look up a worker by id.

    Raises:
        WorkerNotFound: If no such worker exists.
    """
    worker = Worker.get_or_none(Worker.id == worker_id)
    if worker is None:
        raise WorkerNotFound(worker_id)
    return worker


def used_cidrs() -> list[str]:
    """All overlay CIDRs currently held."""
    return [row.cidr for row in Worker.select(Worker.cidr)]


async def enroll_worker(draft: dict, pool: str) -> Worker:
    """
    Allocate an overlay address and persist the worker atomically.

    Args:
        draft: Worker fields without ``cidr``.
        pool: Overlay network to allocate from.

    Returns:
        The persisted Worker.

    Raises:
        PoolExhausted: If the pool has no free host address.
        StorePersistFailure: If the insert fails.
    """
    async with _enroll_lock:
        cidr = allocate_address(pool, used_cidrs())
        logger.debug(f"Allocated {cidr} for worker '{draft.get('name')}'")
        return insert({**draft, "cidr": cidr})
