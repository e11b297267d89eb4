"""
Worker database model for wgmesh.

This module defines the Worker model, the master's durable record of one
mesh member. Rows are written once at enrollment and never updated.
"""

import peewee

from wgmesh.db.base import BaseModel


# =============================================================================
# Worker Model
# =============================================================================


class Worker(BaseModel):
    """
    Represents an enrolled worker host.

    Attributes:
        id: Auto-increment identifier assigned on insert.
        name: Human label; uniqueness is not enforced.
        ip: Address or hostname of the worker HTTP API.
        port: TCP port of the worker HTTP API.
        api_key: Shared secret sent as X-API-Key.
        private_key: WireGuard private key, generated and kept at the master.
        public_key: WireGuard public key.
        cidr: Overlay address in a.b.c.d/32 form.
    """

    id = peewee.AutoField()
    name = peewee.CharField()
    ip = peewee.CharField()
    port = peewee.IntegerField()
    api_key = peewee.CharField()

    # -------------------------------------------------------------------------
    # Tunnel Identity
    # -------------------------------------------------------------------------

    private_key = peewee.TextField(default="")
    public_key = peewee.TextField(default="")
    cidr = peewee.CharField(default="")

    class Meta:
        table_name = "workers"

    # =========================================================================
    # Helpers
    # =========================================================================

    @property
    def api_url(self) -> str:
        """Base URL of the worker HTTP API."""
        return f"http://{self.ip}:{self.port}"

    def endpoint(self, listen_port: int) -> str:
        """WireGuard endpoint string other peers use to reach this worker."""
        return f"{self.ip}:{listen_port}"

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        """Convert worker to dictionary for API responses (keys included)."""
        return {
            "id": self.id,
            "name": self.name,
            "ip": self.ip,
            "port": self.port,
            "api_key": self.api_key,
            "private_key": self.private_key,
            "public_key": self.public_key,
            "cidr": self.cidr,
        }
