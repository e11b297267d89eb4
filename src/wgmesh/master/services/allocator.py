"""
Overlay address allocation.

Workers receive single-host (/32) addresses from the overlay pool. The
lowest free host address wins, so the next allocation is predictable from
the registry contents alone.
"""

import ipaddress
from typing import Iterable


class PoolExhausted(Exception):
    """Raised when every host address of the pool is taken."""

    def __init__(self, pool: str):
        super().__init__(f"no available addresses in {pool}")
        self.pool = pool


def _used_addresses(used_cidrs: Iterable[str]) -> set[ipaddress.IPv4Address]:
    used = set()
    for cidr in used_cidrs:
        if not cidr or not cidr.strip():
            continue
        addr = cidr.strip().split("/")[0]
        try:
            used.add(ipaddress.IPv4Address(addr))
        except ValueError:
            # Not an address we could have handed out
            continue
    return used


def allocate_address(pool: str, used_cidrs: Iterable[str]) -> str:
    """
    Return the lowest free ``a.b.c.d/32`` inside ``pool``.

    Candidates run from network+1 up to, but excluding, the broadcast
    address. Only the address part of each used CIDR is compared.

    Args:
        pool: Overlay network, e.g. "10.100.0.0/22".
        used_cidrs: CIDRs already held by workers.

    Raises:
        PoolExhausted: If no host address is free.
        ValueError: If ``pool`` is not a valid IPv4 network.
    """
    network = ipaddress.IPv4Network(pool, strict=True)
    used = _used_addresses(used_cidrs)

    first = int(network.network_address) + 1
    last = int(network.broadcast_address)
    for value in range(first, last):
        candidate = ipaddress.IPv4Address(value)
        if candidate not in used:
            return f"{candidate}/32"

    raise PoolExhausted(pool)
