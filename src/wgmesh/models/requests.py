"""
Pydantic models for API requests and responses.

This module defines the data transfer objects used between the admin
client, the master, and the worker agents.

Model Categories:
    - Master Requests/Responses: Worker enrollment and listing
    - Worker Requests: Interface creation and peer addition
    - Error Responses: Standardized error formats
"""

from pydantic import BaseModel, Field


# =============================================================================
# Master Request Models
# =============================================================================


class WorkerCreateRequest(BaseModel):
    """
    Request body for enrolling a worker with the master.

    The key pair is normally generated by the master; the optional keys are
    only used when local key generation is unavailable.
    """

    name: str = Field(..., min_length=1, description="Human label")
    ip: str = Field(..., min_length=1, description="Worker API address or hostname")
    port: int = Field(..., ge=1, le=65535, description="Worker API port")
    api_key: str = Field(..., description="Worker shared secret")
    private_key: str = Field(default="", description="Fallback private key")
    public_key: str = Field(default="", description="Fallback public key")


# =============================================================================
# Master Response Models
# =============================================================================


class WorkerCreateResponse(BaseModel):
    """Response for a successful enrollment."""

    id: int
    cidr: str
    message: str


class WorkerResponse(BaseModel):
    """Full worker record as returned by GET /api/workers."""

    id: int
    name: str
    ip: str
    port: int
    api_key: str
    private_key: str
    public_key: str
    cidr: str


# =============================================================================
# Worker Request Models
# =============================================================================
#
# Required fields default to empty strings so that absence is reported as
# "missing fields" after authentication, not as a schema error before it.


class InterfaceRequest(BaseModel):
    """Request body for POST /api/wg/interface."""

    iface: str = ""
    private_key: str = ""
    listen_port: int = 0
    address: str = ""

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("iface", "private_key", "address")
            if not getattr(self, name)
        ]


class PeerRequest(BaseModel):
    """Request body for POST /api/wg/peer."""

    iface: str = ""
    public_key: str = ""
    allowed_ips: str = ""
    endpoint: str = ""

    def missing_fields(self) -> list[str]:
        return [
            name
            for name in ("iface", "public_key", "allowed_ips")
            if not getattr(self, name)
        ]


class MessageResponse(BaseModel):
    """Simple acknowledgement."""

    message: str


# =============================================================================
# Error Response Models
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str
