"""
WireGuard interface config file handling.

The file is never parsed and re-emitted. Rewriting the ``[Interface]``
stanza keeps everything from the first ``"\\n[Peer]"`` onward byte for byte,
and new peers are appended as text, so fields added by an operator survive.
"""

import os

from wgmesh.utils.logger import get_logger

logger = get_logger(__name__)

PEER_SENTINEL = "\n[Peer]"
FILE_MODE = 0o600


# =============================================================================
# Rendering
# =============================================================================


def render_interface(private_key: str, address: str, listen_port: int) -> str:
    """Render the ``[Interface]`` stanza."""
    return (
        "[Interface]\n"
        f"PrivateKey = {private_key}\n"
        f"Address = {address}\n"
        f"ListenPort = {listen_port}\n"
    )


def render_peer(public_key: str, allowed_ips: str, endpoint: str = "") -> str:
    """Render one ``[Peer]`` block, including its leading blank line."""
    block = f"\n[Peer]\nPublicKey = {public_key}\nAllowedIPs = {allowed_ips}\n"
    if endpoint:
        block += f"Endpoint = {endpoint}\n"
    return block


def peer_tail(text: str) -> str:
    """Everything from the first peer sentinel to the end, or ``""``."""
    idx = text.find(PEER_SENTINEL)
    if idx == -1:
        return ""
    return text[idx:]


# =============================================================================
# File Operations
# =============================================================================


def read_conf(path: str) -> str:
    """Return the file contents, or ``""`` if it does not exist."""
    try:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return ""


def _write_private(path: str, content: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
        os.fchmod(f.fileno(), FILE_MODE)
        f.write(content)


def write_interface(
    path: str, private_key: str, address: str, listen_port: int
) -> bool:
    """
    Write a fresh interface stanza, keeping any existing peer blocks.

    Returns:
        True if existing peer blocks were carried over.

    Raises:
        OSError: If the file cannot be read or written.
    """
    preserved = peer_tail(read_conf(path))
    content = render_interface(private_key, address, listen_port) + preserved
    _write_private(path, content)

    logger.info(
        f"Wrote interface conf to {path} (len={len(content)}) "
        f"preserved-peers={bool(preserved)}"
    )
    return bool(preserved)


def has_peer(path: str, public_key: str) -> bool:
    """Whether the file already holds a peer with this public key."""
    try:
        text = read_conf(path)
    except OSError as e:
        logger.warning(f"Could not read {path} for duplicate check: {e}")
        return False
    return f"PublicKey = {public_key}" in text


def append_peer(
    path: str, public_key: str, allowed_ips: str, endpoint: str = ""
) -> int:
    """
    Append a peer block, creating the file (mode 0600) if needed.

    Returns:
        Number of characters written.

    Raises:
        OSError: If the file cannot be opened or written.
    """
    block = render_peer(public_key, allowed_ips, endpoint)
    fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, FILE_MODE)
    with os.fdopen(fd, "a", encoding="utf-8", newline="") as f:
        written = f.write(block)

    logger.info(f"Appended peer to {path} chars={written}")
    return written
