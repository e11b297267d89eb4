"""
Worker agent configuration.

A global Config instance that can be modified at runtime.
"""

import os
from dataclasses import dataclass, field

from wgmesh.models.enums import LogLevel


def _api_key_from_env() -> str:
    return os.environ.get("WORKER_API_KEY", "")


@dataclass
class WorkerConfig:
    """Worker agent configuration."""

    # Network Configuration
    BIND_IP: str = "0.0.0.0"
    PORT: int = 8080

    # Authentication (shared secret, also accepted from WORKER_API_KEY)
    API_KEY: str = field(default_factory=_api_key_from_env)

    # Path Configuration
    CONF_DIR: str = "/etc/wireguard"
    LOG_FILE: str = ""

    # External Commands
    WG_BIN: str = "wg"
    WG_QUICK_BIN: str = "wg-quick"
    SYSTEMCTL_BIN: str = "systemctl"

    # Logging Configuration
    LOG_LEVEL: LogLevel = LogLevel.INFO

    def get_conf_path(self, iface: str) -> str:
        """Path of the config file for an interface."""
        return os.path.join(self.CONF_DIR, f"{iface}.conf")

    def get_unit_name(self, iface: str) -> str:
        """Service supervisor unit managing an interface."""
        return f"wg-quick@{iface}"


config = WorkerConfig()
