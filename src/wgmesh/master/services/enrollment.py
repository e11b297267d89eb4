"""
Enrollment orchestration.

Enrolling a worker happens in two phases:

1. On the request path: obtain a key pair, allocate an overlay address and
   persist the worker. The admin gets its answer here.
2. In the background: the mesh fan-out. The new worker is told to create
   its interface, then every pre-existing worker and the new one exchange
   peer entries.

The fan-out is best-effort. Each call is bounded by the worker request
timeout, and failures are logged without stopping the remaining calls.
Workers deduplicate peers by public key, so a replayed fan-out is harmless.
"""

import asyncio
from dataclasses import dataclass, field

import httpx

from wgmesh.db.worker import Worker
from wgmesh.master.config import config
from wgmesh.master.services import registry, worker_client
from wgmesh.models.enums import EnrollmentState
from wgmesh.utils.logger import get_logger
from wgmesh.utils.wireguard import KeyGenerationError, generate_keypair

logger = get_logger(__name__)


# =============================================================================
# In-Memory Enrollment Tracking
# =============================================================================


@dataclass
class EnrollmentRecord:
    """Progress of one enrollment (not persisted)."""

    worker_id: int
    state: EnrollmentState = EnrollmentState.PERSISTED
    calls: int = 0
    failures: int = 0
    history: list[EnrollmentState] = field(default_factory=list)


class EnrollmentTracker:
    """Keeps the state machine position of every enrollment in this process."""

    def __init__(self):
        self._records: dict[int, EnrollmentRecord] = {}

    def start(self, worker_id: int) -> EnrollmentRecord:
        record = EnrollmentRecord(
            worker_id=worker_id,
            history=[EnrollmentState.DRAFT, EnrollmentState.PERSISTED],
        )
        self._records[worker_id] = record
        return record

    def advance(self, worker_id: int, state: EnrollmentState) -> None:
        record = self._records.get(worker_id) or self.start(worker_id)
        record.state = state
        record.history.append(state)
        logger.debug(f"Enrollment {worker_id}: {state.value}")

    def record_call(self, worker_id: int, ok: bool) -> None:
        record = self._records.get(worker_id)
        if record is None:
            return
        record.calls += 1
        if not ok:
            record.failures += 1

    def get(self, worker_id: int) -> EnrollmentRecord | None:
        return self._records.get(worker_id)

    def clear(self) -> None:
        self._records.clear()


tracker = EnrollmentTracker()


# =============================================================================
# Phase 1: Key Pair, Allocation, Persistence
# =============================================================================


async def obtain_keypair(fallback_private: str, fallback_public: str) -> tuple[str, str]:
    """
    Generate a key pair, falling back to keys supplied by the caller.

    Returns empty keys when neither is available; the worker is still
    enrolled and its interface can be fixed up by the operator.
    """
    try:
        private_key, public_key = await generate_keypair(config.WG_BIN)
        logger.info(f"Generated key (public)={public_key} private=(masked)")
        return private_key, public_key
    except KeyGenerationError as e:
        logger.warning(f"Key generation failed: {e}")

    if fallback_private and fallback_public:
        logger.info(f"Using supplied key pair (public)={fallback_public}")
        return fallback_private, fallback_public

    logger.warning("No key pair available, enrolling with empty keys")
    return "", ""


async def register_worker(
    name: str,
    ip: str,
    port: int,
    api_key: str,
    private_key: str = "",
    public_key: str = "",
) -> Worker:
    """
    Run the synchronous part of an enrollment.

    Returns:
        The persisted Worker; the fan-out has not started yet.

    Raises:
        PoolExhausted: Overlay pool is full.
        StorePersistFailure: Registry insert failed.
    """
    private_key, public_key = await obtain_keypair(private_key, public_key)

    draft = {
        "name": name,
        "ip": ip,
        "port": port,
        "api_key": api_key,
        "private_key": private_key,
        "public_key": public_key,
    }
    worker = await registry.enroll_worker(draft, config.OVERLAY_POOL)
    tracker.start(worker.id)

    logger.info(
        f"Worker created id={worker.id} name={worker.name} "
        f"ip={worker.ip}:{worker.port} cidr={worker.cidr} pub={worker.public_key}"
    )
    return worker


# =============================================================================
# Phase 2: Mesh Fan-Out
# =============================================================================


@dataclass
class MeshResult:
    """Summary of one fan-out."""

    worker_id: int
    calls: int = 0
    failures: int = 0

    @property
    def complete(self) -> bool:
        return self.failures == 0


async def _call(result: MeshResult, description: str, coro) -> bool:
    """Await one worker call; log and swallow any failure."""
    result.calls += 1
    try:
        response = await coro
    except (httpx.RequestError, httpx.InvalidURL) as e:
        logger.error(f"{description} failed: {e!r}")
        result.failures += 1
        tracker.record_call(result.worker_id, ok=False)
        return False

    ok = response.is_success
    log = logger.info if ok else logger.error
    log(
        f"{description} response status={response.status_code} "
        f"body={response.text.strip()}"
    )
    if not ok:
        result.failures += 1
    tracker.record_call(result.worker_id, ok=ok)
    return ok


async def setup_worker_mesh(new: Worker) -> MeshResult:
    """
    Connect a freshly enrolled worker to every pre-existing worker.

    The interface on the new worker is requested before any peer is sent to
    it. Existing workers never get their interface re-created, since their
    peers are already in place.
    """
    iface = config.WG_INTERFACE
    listen_port = config.WG_LISTEN_PORT
    result = MeshResult(worker_id=new.id)

    logger.info(f"Setup mesh for new worker {new.name} ({new.ip})")

    tracker.advance(new.id, EnrollmentState.IFACE_REQUESTED)
    await _call(
        result,
        f"Create iface on new '{new.name}'",
        worker_client.create_interface(new, iface, listen_port),
    )

    tracker.advance(new.id, EnrollmentState.MESHING_IN_PROGRESS)
    existing = [w for w in registry.list_workers() if w.id < new.id]
    for other in existing:
        logger.debug(f"Skipping interface re-create on existing worker '{other.name}'")

        await _call(
            result,
            f"Add new '{new.name}' on existing '{other.name}'",
            worker_client.add_peer(other, new, iface, listen_port),
        )
        await _call(
            result,
            f"Add existing '{other.name}' on new '{new.name}'",
            worker_client.add_peer(new, other, iface, listen_port),
        )

    if config.MESH_SETTLE_SECONDS > 0:
        await asyncio.sleep(config.MESH_SETTLE_SECONDS)

    tracker.advance(new.id, EnrollmentState.MESHING_COMPLETE)
    logger.info(
        f"Mesh setup for '{new.name}' finished: {result.calls} calls, "
        f"{result.failures} failed"
    )
    return result


async def run_fanout(new: Worker) -> None:
    """Background-task entry point; never raises."""
    try:
        await setup_worker_mesh(new)
    except Exception as e:
        logger.exception(f"Mesh setup for worker {new.id} aborted: {e}")
