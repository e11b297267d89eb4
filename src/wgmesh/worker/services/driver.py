"""
Tunnel driver and service supervisor invocations.

Live changes go through ``wg``; persistence across reboots goes through the
``wg-quick@<iface>`` systemd unit. When systemd refuses to start or restart
the unit, ``wg-quick`` is called directly instead.
"""

from wgmesh.utils.logger import get_logger
from wgmesh.utils.wireguard import CommandResult, run_command
from wgmesh.worker.config import config

logger = get_logger(__name__)


def _log_result(label: str, result: CommandResult) -> None:
    output = result.output.strip()
    if result.ok:
        logger.info(f"{label} ok output={output}")
    else:
        logger.warning(f"{label} failed rc={result.returncode} output={output}")


# =============================================================================
# Driver (wg)
# =============================================================================


async def set_peer(
    iface: str, public_key: str, allowed_ips: str, endpoint: str = ""
) -> CommandResult:
    """Add or update a peer on the running interface."""
    args = [config.WG_BIN, "set", iface, "peer", public_key, "allowed-ips", allowed_ips]
    if endpoint:
        args += ["endpoint", endpoint]

    logger.info(f"Executing {' '.join(args)}")
    result = await run_command(args)
    _log_result("wg set", result)
    return result


async def show() -> CommandResult:
    """Return ``wg show`` output for all interfaces."""
    result = await run_command([config.WG_BIN, "show"])
    if not result.ok:
        _log_result("wg show", result)
    else:
        logger.debug(f"wg show output len={len(result.output)}")
    return result


async def quick(action: str, iface: str) -> CommandResult:
    """Run ``wg-quick up|down <iface>``."""
    result = await run_command([config.WG_QUICK_BIN, action, iface])
    _log_result(f"wg-quick {action} {iface}", result)
    return result


# =============================================================================
# Service Supervisor (systemctl)
# =============================================================================


async def systemctl(action: str, iface: str) -> CommandResult:
    """Run ``systemctl <action> wg-quick@<iface>``."""
    unit = config.get_unit_name(iface)
    result = await run_command([config.SYSTEMCTL_BIN, action, unit])
    _log_result(f"systemctl {action} {unit}", result)
    return result


async def bring_up(iface: str) -> bool:
    """
    Enable and start the interface unit, falling back to ``wg-quick up``.

    Returns:
        True if the interface was brought up by either path.
    """
    await systemctl("enable", iface)
    start = await systemctl("start", iface)
    if start.ok:
        return True

    logger.warning(f"Falling back to wg-quick up {iface}")
    return (await quick("up", iface)).ok


async def reload(iface: str) -> bool:
    """
    Restart the interface unit so it matches the persisted config.

    Falls back to ``wg-quick down`` followed by ``wg-quick up``.

    Returns:
        True if the interface was restarted by either path.
    """
    restart = await systemctl("restart", iface)
    if restart.ok:
        return True

    logger.warning(
        f"systemctl restart failed, attempting wg-quick down/up for {iface}"
    )
    await quick("down", iface)
    return (await quick("up", iface)).ok
