"""Tests for the wgmesh command line interface."""

import json

import pytest
from typer.testing import CliRunner

from wgmesh.cli import client
from wgmesh.cli import config as cli_config
from wgmesh.cli.main import app

runner = CliRunner()

WORKERS = [
    {
        "id": 1,
        "name": "alpha",
        "ip": "192.0.2.10",
        "port": 8080,
        "api_key": "key-a",
        "private_key": "cHJpdmF0ZS1rZXktYWxwaGEtMDAwMDAwMDAwMDAwMDA=",
        "public_key": "pub-a",
        "cidr": "10.100.0.1/32",
    }
]


@pytest.fixture(autouse=True)
def restore_cli_config(monkeypatch):
    for name in ("MASTER_ADDRESS", "MASTER_PORT", "OUTPUT_FORMAT"):
        monkeypatch.setattr(cli_config, name, getattr(cli_config, name))


class TestWorkersCommands:
    def test_list_json(self, monkeypatch):
        monkeypatch.setattr(client, "get_workers", lambda: WORKERS)

        result = runner.invoke(app, ["--format", "json", "workers", "list"])

        assert result.exit_code == 0
        assert json.loads(result.output) == WORKERS

    def test_list_table_masks_private_key(self, monkeypatch):
        monkeypatch.setattr(client, "get_workers", lambda: WORKERS)

        result = runner.invoke(app, ["workers", "list"])

        assert result.exit_code == 0
        assert "alpha" in result.output
        assert "10.100.0.1/32" in result.output
        assert WORKERS[0]["private_key"] not in result.output

    def test_list_empty(self, monkeypatch):
        monkeypatch.setattr(client, "get_workers", lambda: [])

        result = runner.invoke(app, ["workers", "list"])

        assert result.exit_code == 0
        assert "No workers enrolled" in result.output

    def test_list_error(self, monkeypatch):
        def fail():
            raise client.APIError("Network error: connection refused")

        monkeypatch.setattr(client, "get_workers", fail)

        result = runner.invoke(app, ["workers", "list"])

        assert result.exit_code == 1

    def test_master_option(self, monkeypatch):
        seen = {}

        def get_workers():
            seen["url"] = client._get_master_url()
            return []

        monkeypatch.setattr(client, "get_workers", get_workers)

        runner.invoke(app, ["-M", "10.0.0.5", "--master-port", "9090", "workers", "list"])

        assert seen["url"] == "http://10.0.0.5:9090/api"

    def test_add(self, monkeypatch):
        calls = []

        def add_worker(name, ip, port, api_key, private_key="", public_key=""):
            calls.append((name, ip, port, api_key, private_key, public_key))
            return {"id": 3, "cidr": "10.100.0.3/32", "message": "created id=3"}

        monkeypatch.setattr(client, "add_worker", add_worker)

        result = runner.invoke(
            app, ["workers", "add", "gamma", "192.0.2.12", "--api-key", "k", "-p", "9000"]
        )

        assert result.exit_code == 0
        assert calls == [("gamma", "192.0.2.12", 9000, "k", "", "")]
        assert "id=3" in result.output

    def test_add_prompts_for_key(self, monkeypatch):
        calls = []

        def add_worker(name, ip, port, api_key, private_key="", public_key=""):
            calls.append(api_key)
            return {"id": 1, "cidr": "10.100.0.1/32"}

        monkeypatch.setattr(client, "add_worker", add_worker)

        result = runner.invoke(app, ["workers", "add", "a", "192.0.2.10"], input="typed\n")

        assert result.exit_code == 0
        assert calls == ["typed"]

    def test_status(self, monkeypatch):
        output = "interface: wg0\n  listening port: 51820\n"
        monkeypatch.setattr(client, "get_worker_status", lambda worker_id: output)

        result = runner.invoke(app, ["workers", "status", "1"])

        assert result.exit_code == 0
        assert "listening port: 51820" in result.output

    def test_status_not_found(self, monkeypatch):
        def fail(worker_id):
            raise client.APIError("HTTP 404: worker not found", 404, "worker not found")

        monkeypatch.setattr(client, "get_worker_status", fail)

        result = runner.invoke(app, ["workers", "status", "99"])

        assert result.exit_code == 1


class TestServeCommands:
    def test_worker_requires_api_key(self, monkeypatch):
        started = []
        monkeypatch.setattr("wgmesh.worker.app.run", lambda: started.append(True))

        result = runner.invoke(app, ["serve", "worker"], env={"WORKER_API_KEY": ""})

        assert result.exit_code == 1
        assert started == []

    def test_worker_applies_options(self, monkeypatch, tmp_path):
        from wgmesh.worker.config import config

        for name in ("API_KEY", "PORT", "CONF_DIR"):
            monkeypatch.setattr(config, name, getattr(config, name))
        started = []
        monkeypatch.setattr("wgmesh.worker.app.run", lambda: started.append(True))

        result = runner.invoke(
            app,
            ["serve", "worker", "-k", "s3cret", "-p", "8181", "--conf-dir", str(tmp_path)],
        )

        assert result.exit_code == 0
        assert started == [True]
        assert config.API_KEY == "s3cret"
        assert config.PORT == 8181
        assert config.CONF_DIR == str(tmp_path)

    def test_master_rejects_bad_pool(self, monkeypatch):
        from wgmesh.master.config import config

        monkeypatch.setattr(config, "OVERLAY_POOL", config.OVERLAY_POOL)
        started = []
        monkeypatch.setattr("wgmesh.master.app.run", lambda: started.append(True))

        result = runner.invoke(app, ["serve", "master", "--pool", "10.100.0.1/22"])

        assert result.exit_code == 1
        assert started == []

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "wgmesh v" in result.output
