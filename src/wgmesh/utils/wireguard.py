"""
WireGuard CLI utilities for wgmesh.

This module wraps the external ``wg`` tool. Both the master (key
generation) and the worker agent (live interface changes) go through
``run_command``, which runs a subprocess without blocking the event loop
and returns its combined stdout/stderr.
"""

import asyncio
from dataclasses import dataclass

from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)


class KeyGenerationError(Exception):
    """Raised when a WireGuard key pair cannot be generated."""


# =============================================================================
# Command Execution
# =============================================================================


@dataclass
class CommandResult:
    """Outcome of an external command."""

    args: list[str]
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


async def run_command(args: list[str], input_text: str | None = None) -> CommandResult:
    """
    Run an external command and capture its combined output.

    Args:
        args: Program and arguments.
        input_text: Optional text written to the process stdin.

    Returns:
        CommandResult. A missing executable is reported as exit code 127
        rather than raised.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdin=asyncio.subprocess.PIPE if input_text is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except FileNotFoundError:
        logger.warning(f"Command not found: {args[0]}")
        return CommandResult(args, 127, f"{args[0]}: command not found")
    except OSError as e:
        logger.error(f"Failed to start {args[0]}: {e}")
        return CommandResult(args, 126, str(e))

    stdout, _ = await proc.communicate(
        input_text.encode() if input_text is not None else None
    )
    return CommandResult(args, proc.returncode, stdout.decode(errors="replace"))


# =============================================================================
# Key Generation
# =============================================================================


async def generate_keypair(wg_bin: str = "wg") -> tuple[str, str]:
    """
    Generate a WireGuard key pair with ``wg genkey`` and ``wg pubkey``.

    Returns:
        Tuple of (private_key, public_key).

    Raises:
        KeyGenerationError: If either command fails or is unavailable.
    """
    priv = await run_command([wg_bin, "genkey"])
    if not priv.ok:
        raise KeyGenerationError(f"wg genkey failed: {priv.output.strip()}")
    private_key = priv.output.strip()

    pub = await run_command([wg_bin, "pubkey"], input_text=private_key + "\n")
    if not pub.ok:
        raise KeyGenerationError(f"wg pubkey failed: {pub.output.strip()}")

    return private_key, pub.output.strip()


def mask_key(key: str) -> str:
    """Shorten a key for log output."""
    if not key:
        return "<empty>"
    return f"{key[:4]}...{key[-4:]}" if len(key) > 8 else "****"
