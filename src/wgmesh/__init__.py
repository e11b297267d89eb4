"""
wgmesh: full-mesh WireGuard control plane.

A master node keeps the worker inventory and orchestrates, over HTTP, the
creation of ``wg0`` on every worker and the symmetric exchange of peers.
"""

__version__ = "0.1.0"
