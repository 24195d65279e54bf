# routers/mikrotik.py
import logging
import shlex
from typing import Dict, List, Optional

from .base import BaseRouter, RouterError
from lease import Lease
from utils import SSHClient, SSHCommandError

logger = logging.getLogger(__name__)

DEFAULT_LEASE_COMMAND = "/ip dhcp-server lease print terse"

# RouterOS terse keys -> Lease fields
_LEASE_KEYS = {
    "address": "address",
    "mac-address": "mac_address",
    "host-name": "hostname",
}

def _split_terse_line(line: str) -> List[str]:
    """Splits a terse line into tokens, keeping quoted values such as host-name="my pc" together."""
    try:
        return shlex.split(line)
    except ValueError:
        # Unbalanced quotes, fall back to a plain whitespace split
        return line.split()

def parse_lease_line(line: str) -> Optional[Lease]:
    """Parses a single line of `print terse` output.

    Returns None for blank lines, comments, and lines without both an address and a MAC.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    fields: Dict[str, str] = {}
    for token in _split_terse_line(line):
        key, sep, value = token.partition("=")
        if sep and key in _LEASE_KEYS:
            fields[_LEASE_KEYS[key]] = value

    if not (fields.get("address") and fields.get("mac_address")):
        logger.debug(f"Skipping lease line without address and MAC: {line}")
        return None
    return Lease(**fields)

def parse_leases(output: str) -> List[Lease]:
    """Parses the full `print terse` output into Lease records."""
    leases: List[Lease] = []
    for line in output.splitlines():
        lease = parse_lease_line(line)
        if lease:
            leases.append(lease)
    return leases

class MikrotikRouter(BaseRouter):
    """Implementation of BaseRouter for MikroTik RouterOS devices using SSH."""

    def __init__(self, config, host: Optional[str] = None, username: Optional[str] = None,
                 password: Optional[str] = None):
        self.config = config
        self.router_ip = host or config.get("router_ip")
        self.router_user = username or config.get("router_user")
        self.router_password = password
        self.ssh_port = config.get("ssh_port", 22)
        self.ssh_timeout = config.get("ssh_timeout", 10)
        self.lease_cmd = config.get("lease_command", DEFAULT_LEASE_COMMAND)

    def _make_client(self) -> SSHClient:
        return SSHClient(hostname=self.router_ip, username=self.router_user, password=self.router_password,
                         port=self.ssh_port, timeout=self.ssh_timeout)

    def get_leases(self) -> List[Lease]:
        """Runs the lease command on the router and parses its output."""
        ssh_client = self._make_client()
        if not ssh_client.connect():
            raise RouterError(f"Could not connect to router {self.router_ip}")

        try:
            output = ssh_client.execute_command(self.lease_cmd)
        except SSHCommandError as e:
            raise RouterError(str(e)) from e
        finally:
            ssh_client.close()

        leases = parse_leases(output)
        logger.info(f"Retrieved {len(leases)} DHCP leases from {self.router_ip}")
        return leases
