"""
Per-interface locking.

All changes to one interface (config file writes and live driver calls)
run under that interface's lock, so concurrent fan-outs reaching the same
worker cannot tear the file or interleave ``wg``/``wg-quick`` invocations.
"""

import asyncio


class InterfaceLocks:
    """Lazily created asyncio.Lock per interface name."""

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, iface: str) -> asyncio.Lock:
        lock = self._locks.get(iface)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[iface] = lock
        return lock


interface_locks = InterfaceLocks()
