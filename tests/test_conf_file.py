"""Tests for WireGuard config file handling on the worker."""

import os
import stat

from wgmesh.worker.services import conf_file

EXISTING_PEERS = (
    "\n[Peer]\n"
    "PublicKey = P1\n"
    "AllowedIPs = 10.100.0.1/32\n"
    "Endpoint = 198.51.100.1:51820\n"
    "PersistentKeepalive = 25\n"
    "# operator note\r\n"
)


def _mode(path) -> int:
    return stat.S_IMODE(os.stat(path).st_mode)


class TestRendering:
    def test_interface_stanza(self):
        text = conf_file.render_interface("K", "10.100.0.2/32", 51820)
        assert text == (
            "[Interface]\nPrivateKey = K\nAddress = 10.100.0.2/32\nListenPort = 51820\n"
        )

    def test_peer_block_with_endpoint(self):
        text = conf_file.render_peer("P", "10.100.0.1/32", "198.51.100.1:51820")
        assert text == (
            "\n[Peer]\nPublicKey = P\nAllowedIPs = 10.100.0.1/32\n"
            "Endpoint = 198.51.100.1:51820\n"
        )

    def test_peer_block_without_endpoint(self):
        text = conf_file.render_peer("P", "10.100.0.1/32")
        assert "Endpoint" not in text
        assert text.startswith("\n[Peer]\n")

    def test_peer_tail(self):
        assert conf_file.peer_tail("[Interface]\nA = 1\n") == ""
        assert conf_file.peer_tail("[Interface]\n" + EXISTING_PEERS) == EXISTING_PEERS


class TestWriteInterface:
    def test_new_file(self, tmp_path):
        path = str(tmp_path / "wg0.conf")

        preserved = conf_file.write_interface(path, "K", "10.100.0.2/32", 51820)

        assert preserved is False
        assert conf_file.read_conf(path) == conf_file.render_interface(
            "K", "10.100.0.2/32", 51820
        )
        assert _mode(path) == 0o600

    def test_keeps_peer_blocks_byte_for_byte(self, tmp_path):
        path = tmp_path / "wg0.conf"
        old_header = "[Interface]\nPrivateKey = OLD\nAddress = 10.0.0.9/32\nMTU = 1380\n"
        path.write_bytes((old_header + EXISTING_PEERS).encode())

        preserved = conf_file.write_interface(str(path), "NEW", "10.100.0.2/32", 51820)

        assert preserved is True
        expected = conf_file.render_interface("NEW", "10.100.0.2/32", 51820) + EXISTING_PEERS
        assert path.read_bytes() == expected.encode()
        assert b"MTU" not in path.read_bytes()

    def test_tightens_permissions(self, tmp_path):
        path = tmp_path / "wg0.conf"
        path.write_text("[Interface]\n")
        os.chmod(path, 0o644)

        conf_file.write_interface(str(path), "K", "10.100.0.2/32", 51820)

        assert _mode(path) == 0o600


class TestPeers:
    def test_append_creates_file(self, tmp_path):
        path = str(tmp_path / "wg0.conf")

        conf_file.append_peer(path, "P", "10.100.0.1/32", "198.51.100.1:51820")

        assert conf_file.read_conf(path) == conf_file.render_peer(
            "P", "10.100.0.1/32", "198.51.100.1:51820"
        )
        assert _mode(path) == 0o600

    def test_append_keeps_existing_text(self, tmp_path):
        path = str(tmp_path / "wg0.conf")
        conf_file.write_interface(path, "K", "10.100.0.2/32", 51820)
        before = conf_file.read_conf(path)

        conf_file.append_peer(path, "P", "10.100.0.1/32")

        assert conf_file.read_conf(path).startswith(before)

    def test_has_peer(self, tmp_path):
        path = str(tmp_path / "wg0.conf")
        assert conf_file.has_peer(path, "P") is False

        conf_file.append_peer(path, "P", "10.100.0.1/32")

        assert conf_file.has_peer(path, "P") is True
        assert conf_file.has_peer(path, "Q") is False

    def test_read_missing_file(self, tmp_path):
        assert conf_file.read_conf(str(tmp_path / "absent.conf")) == ""
