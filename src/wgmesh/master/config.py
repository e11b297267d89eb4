"""
Master server configuration for wgmesh.

This module defines the configuration dataclass for the master,
providing a centralized place for all configurable parameters.

Configuration can be modified at runtime by importing the global config
instance and updating its attributes before starting the server.

Usage:
    from wgmesh.master.config import config

    # Modify configuration before starting
    config.PORT = 9000
    config.LOG_LEVEL = LogLevel.DEBUG
"""

import ipaddress
from dataclasses import dataclass

from wgmesh.models.enums import LogLevel


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class MasterConfig:
    """
    Master server configuration.

    Attributes:
        BIND_IP: IP address to bind the server to.
        PORT: HTTP API port.
        DB_FILE: Path to the SQLite registry file.
        OVERLAY_POOL: IPv4 network workers receive /32 addresses from.
        WG_INTERFACE: Interface name created on every worker.
        WG_LISTEN_PORT: WireGuard UDP port on every worker.
        WORKER_REQUEST_TIMEOUT: Timeout in seconds for each master->worker call.
        MESH_SETTLE_SECONDS: Pause at the end of a fan-out.
        LOG_LEVEL: Logging verbosity level.
    """

    # -------------------------------------------------------------------------
    # Network Configuration
    # -------------------------------------------------------------------------

    BIND_IP: str = "0.0.0.0"
    PORT: int = 8080

    # -------------------------------------------------------------------------
    # Path Configuration
    # -------------------------------------------------------------------------

    DB_FILE: str = "/etc/wireguard/master-sw/master.db"
    WEB_ROOT: str = "/etc/wireguard/master-sw/web"
    LOG_FILE: str = ""

    # -------------------------------------------------------------------------
    # Mesh Configuration
    # -------------------------------------------------------------------------

    OVERLAY_POOL: str = "10.100.0.0/22"
    WG_INTERFACE: str = "wg0"
    WG_LISTEN_PORT: int = 51820
    WG_BIN: str = "wg"

    # -------------------------------------------------------------------------
    # Timing Configuration
    # -------------------------------------------------------------------------

    WORKER_REQUEST_TIMEOUT: float = 5.0
    MESH_SETTLE_SECONDS: float = 0.5

    # -------------------------------------------------------------------------
    # Logging Configuration
    # -------------------------------------------------------------------------

    LOG_LEVEL: LogLevel = LogLevel.INFO

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def get_overlay_network(self) -> ipaddress.IPv4Network:
        """
        Parse the overlay pool.

        Raises:
            ValueError: If OVERLAY_POOL is not a valid IPv4 network.
        """
        return ipaddress.IPv4Network(self.OVERLAY_POOL, strict=True)


# =============================================================================
# Global Instance
# =============================================================================

# Global config instance - modify before server startup
config = MasterConfig()
