from unittest.mock import MagicMock

import paramiko
import pytest

from utils import SSHClient, SSHCommandError, oui_from_mac


class TestOuiFromMac:
    @pytest.mark.parametrize("mac", [
        "aa:bb:cc:11:22:33",
        "AA:BB:CC:11:22:33",
        "aa-bb-cc-11-22-33",
        "aabb.cc11.2233",
        "AaBbCc112233",
    ])
    def test_separator_and_case_insensitive(self, mac):
        """Every separator style and case gives the same OUI key."""
        assert oui_from_mac(mac) == "AABBCC"

    def test_too_short_raises(self):
        """Fewer than 6 hex digits cannot form an OUI."""
        with pytest.raises(ValueError):
            oui_from_mac("AA:BB")

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            oui_from_mac("")


def _connected_client(output: bytes = b"", error: bytes = b"", exit_status: int = 0) -> SSHClient:
    client = SSHClient(hostname="10.0.0.1", username="admin", password="secret")
    stdout = MagicMock()
    stdout.read.return_value = output
    stdout.channel.recv_exit_status.return_value = exit_status
    stderr = MagicMock()
    stderr.read.return_value = error
    client.client = MagicMock()
    client.client.exec_command.return_value = (MagicMock(), stdout, stderr)
    return client


class TestSSHClient:
    def test_execute_command_returns_output(self):
        client = _connected_client(output=b"0 address=10.0.0.5\n")
        assert client.execute_command("/ip dhcp-server lease print terse") == "0 address=10.0.0.5\n"

    def test_execute_command_requires_connection(self):
        """Running a command before connect() is an error."""
        client = SSHClient(hostname="10.0.0.1", username="admin")
        with pytest.raises(SSHCommandError):
            client.execute_command("whoami")

    def test_execute_command_nonzero_exit_raises(self):
        client = _connected_client(error=b"bad command name", exit_status=1)
        with pytest.raises(SSHCommandError):
            client.execute_command("/bogus")

    def test_execute_command_channel_failure_raises(self):
        client = _connected_client()
        client.client.exec_command.side_effect = paramiko.SSHException("channel closed")
        with pytest.raises(SSHCommandError):
            client.execute_command("/ip dhcp-server lease print terse")

    def test_connect_failure_returns_false(self, monkeypatch):
        """Connection errors are logged and reported as False, not raised."""
        fake = MagicMock()
        fake.connect.side_effect = OSError("no route to host")
        monkeypatch.setattr(paramiko, "SSHClient", lambda: fake)
        client = SSHClient(hostname="10.0.0.1", username="admin", password="secret")
        assert client.connect() is False
        assert client.client is None

    def test_close_is_idempotent(self):
        client = _connected_client()
        client.close()
        client.close()
        assert client.client is None
