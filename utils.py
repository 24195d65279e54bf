# utils.py
import re
import paramiko
import logging
import getpass
from typing import Optional

logger = logging.getLogger(__name__)

_NON_HEX = re.compile(r"[^0-9A-Fa-f]")

class SSHCommandError(Exception):
    """Raised when a remote command cannot be run or exits non-zero."""

def oui_from_mac(mac: str) -> str:
    """Returns the OUI of a MAC address: first 6 hex digits, uppercased.

    Separators (':', '-', '.', whitespace) are ignored, so 'aa:bb:cc:..',
    'AA-BB-CC-..' and 'aabb.cc..' all give 'AABBCC'.
    """
    hex_digits = _NON_HEX.sub("", mac or "")
    if len(hex_digits) < 6:
        raise ValueError(f"Not enough hex digits for an OUI in MAC '{mac}'")
    return hex_digits[:6].upper()

class SSHClient:
    """A utility class for handling SSH connections and command execution."""

    def __init__(self, hostname: str, username: str, password: Optional[str] = None,
                  port: int = 22, timeout: int = 10):
        self.hostname = hostname
        self.username = username
        self.password = password
        self.port = port
        self.timeout = timeout
        self.client: Optional[paramiko.SSHClient] = None

    def connect(self) -> bool:
        """Connects to the SSH server, using the password or default SSH keys and agent."""
        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            if self.password:
                self.client.connect(hostname=self.hostname, port=self.port, username=self.username,
                                    password=self.password, timeout=self.timeout,
                                    look_for_keys=False, allow_agent=False)
            else:
                # Attempt key-based authentication first, fall back to asking for a password
                try:
                    self.client.connect(hostname=self.hostname, port=self.port, username=self.username,
                                        timeout=self.timeout, look_for_keys=True, allow_agent=True)
                except (paramiko.ssh_exception.PasswordRequiredException,
                        paramiko.ssh_exception.AuthenticationException):
                    self.password = getpass.getpass(f"Enter password for {self.username}@{self.hostname}: ")
                    self.client.connect(hostname=self.hostname, port=self.port, username=self.username,
                                        password=self.password, timeout=self.timeout,
                                        look_for_keys=False, allow_agent=False)

            return True
        except Exception as e:
            logger.error(f"Error connecting to {self.hostname}: {e}")
            self.close()
            return False

    def execute_command(self, command: str) -> str:
        """Executes a command on the connected SSH server and returns its output."""
        if not self.client:
            raise SSHCommandError("SSH client not connected. Call connect() first.")
        try:
            stdin, stdout, stderr = self.client.exec_command(command, timeout=self.timeout)
            output = stdout.read().decode(errors="replace")
            error = stderr.read().decode(errors="replace").strip()
            exit_status = stdout.channel.recv_exit_status()
        except (paramiko.SSHException, OSError) as e:
            raise SSHCommandError(f"Error executing command '{command}': {e}") from e

        if error:
            logger.warning(f"Command '{command}' returned error: {error}")
        if exit_status != 0:
            raise SSHCommandError(f"Command '{command}' exited with status {exit_status}")
        return output

    def close(self):
        """Closes the SSH connection."""
        if self.client:
            self.client.close()
            self.client = None
