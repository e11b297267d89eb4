"""
Pytest fixtures for wgmesh tests.

Shared configuration, fake external commands, and an in-process stand-in
for the worker fleet used by the master's fan-out.
"""

import asyncio
import itertools
import json
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from wgmesh.db.base import close_database, initialize_database
from wgmesh.utils.wireguard import CommandResult
from wgmesh.worker.services import conf_file


# ============================================
# Fake external commands
# ============================================


class FakeCommands:
    """Records subprocess invocations and answers with scripted results."""

    def __init__(self):
        self.calls: list[list[str]] = []
        # (program, first argument) -> (returncode, output)
        self.results: dict[tuple[str, str], tuple[int, str]] = {}
        # Event loop turns to give up per call, letting other requests run
        self.yields = 0

    def set(self, program: str, sub: str, returncode: int, output: str = "") -> None:
        self.results[(program, sub)] = (returncode, output)

    def programs(self) -> list[str]:
        return [" ".join(call[:2]) for call in self.calls]

    async def __call__(self, args, input_text=None):
        self.calls.append(list(args))
        for _ in range(self.yields):
            await asyncio.sleep(0)
        returncode, output = self.results.get((args[0], args[1]), (0, ""))
        return CommandResult(list(args), returncode, output)


@pytest.fixture
def fake_commands(monkeypatch):
    """Replace the worker driver's subprocess runner."""
    fake = FakeCommands()
    monkeypatch.setattr("wgmesh.worker.services.driver.run_command", fake)
    return fake


# ============================================
# Fake worker fleet (master fan-out target)
# ============================================


class FakeFleet:
    """
    In-process worker fleet reachable through an httpx MockTransport.

    Each worker is identified by "ip:port" and keeps a real config file
    managed with the worker's own conf_file helpers.
    """

    def __init__(self, root: Path):
        self.root = root
        self.api_keys: dict[str, str] = {}
        self.requests: list[tuple[str, str, dict]] = []
        self.unreachable: set[str] = set()
        self.status_output: dict[str, str] = {}

    def add(self, ip: str, port: int, api_key: str) -> None:
        address = f"{ip}:{port}"
        self.api_keys[address] = api_key
        (self.root / address).mkdir(parents=True, exist_ok=True)

    def conf_path(self, ip: str, port: int, iface: str = "wg0") -> str:
        return str(self.root / f"{ip}:{port}" / f"{iface}.conf")

    def conf_text(self, ip: str, port: int, iface: str = "wg0") -> str:
        return conf_file.read_conf(self.conf_path(ip, port, iface))

    def peer_calls_to(self, address: str) -> list[dict]:
        return [
            body
            for target, path, body in self.requests
            if target == address and path == "/api/wg/peer"
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        address = f"{request.url.host}:{request.url.port}"
        if address in self.unreachable or address not in self.api_keys:
            raise httpx.ConnectError("connection refused", request=request)

        key = request.headers.get("X-API-Key", "")
        if key.lower() != self.api_keys[address].lower():
            return httpx.Response(401, json={"detail": "unauthorized"})

        path = request.url.path
        if path == "/api/wg/status":
            return httpx.Response(
                200,
                text=self.status_output.get(address, ""),
                headers={"content-type": "text/plain; charset=utf-8"},
            )

        body = json.loads(request.content or b"{}")
        self.requests.append((address, path, body))
        conf = str(self.root / address / f"{body['iface']}.conf")

        if path == "/api/wg/interface":
            conf_file.write_interface(
                conf, body["private_key"], body["address"], body["listen_port"]
            )
            return httpx.Response(201, json={"message": "interface created"})

        if path == "/api/wg/peer":
            if conf_file.has_peer(conf, body["public_key"]):
                return httpx.Response(
                    201, json={"message": "peer added (already present)"}
                )
            conf_file.append_peer(
                conf, body["public_key"], body["allowed_ips"], body.get("endpoint", "")
            )
            return httpx.Response(201, json={"message": "peer added"})

        return httpx.Response(404)


# ============================================
# Master fixtures
# ============================================


@pytest.fixture
def fake_keys(monkeypatch):
    """Deterministic key generation: priv-1/pub-1, priv-2/pub-2, ..."""
    counter = itertools.count(1)

    async def generate(wg_bin="wg"):
        n = next(counter)
        return f"priv-{n}", f"pub-{n}"

    monkeypatch.setattr("wgmesh.master.services.enrollment.generate_keypair", generate)
    return generate


@pytest.fixture
def master_config(tmp_path, monkeypatch):
    from wgmesh.master.config import config

    monkeypatch.setattr(config, "DB_FILE", str(tmp_path / "master-sw" / "master.db"))
    monkeypatch.setattr(config, "MESH_SETTLE_SECONDS", 0)
    return config


@pytest.fixture
def master_db(master_config):
    """Registry opened on a temporary file."""
    initialize_database(master_config.DB_FILE)
    yield master_config.DB_FILE
    close_database()


@pytest.fixture
def fleet(tmp_path):
    from wgmesh.master.services import worker_client

    fleet = FakeFleet(tmp_path / "fleet")
    worker_client.set_transport(httpx.MockTransport(fleet.handler))
    yield fleet
    worker_client.set_transport(None)


@pytest.fixture
def master_client(master_config, fake_keys, fleet):
    from wgmesh.master.app import app
    from wgmesh.master.services.enrollment import tracker

    tracker.clear()
    with TestClient(app) as client:
        yield client
    tracker.clear()
    # Connection state is per thread; the test body's own connection
    # must not leak into the next test's database
    close_database()


# ============================================
# Worker fixtures
# ============================================


@pytest.fixture
def worker_config(tmp_path, monkeypatch):
    from wgmesh.worker.config import config

    conf_dir = tmp_path / "wireguard"
    monkeypatch.setattr(config, "API_KEY", "Secret-Key")
    monkeypatch.setattr(config, "CONF_DIR", str(conf_dir))
    return config


@pytest.fixture
def worker_client(worker_config, fake_commands):
    from wgmesh.worker.app import app

    with TestClient(app) as client:
        yield client


@pytest.fixture
def auth_headers():
    return {"X-API-Key": "Secret-Key"}
