"""
SSH Connection

Owns the SSH client to one device and runs commands on it, either as CLI
commands on exec channels or as NETCONF RPCs on a shared session.
"""

from datetime import datetime, timezone, timedelta
from typing import Callable, Optional
import logging
import threading

from junos_exporter.exceptions import NotConnectedError
from .device import Device
from .netconf import RPC_TIMEOUT, open_netconf_session
from .strategies import ExecutionStrategy, NetconfStrategy, ShellStrategy


class SSHConnection:
    """
    Connection to a single device.

    All access to the client and the NETCONF session is serialised by one
    lock, so at most one command runs per connection at any time.
    Connections to different devices are independent.
    """

    def __init__(
        self,
        device: Device,
        client,
        netconf: bool = False,
        session_factory: Callable = open_netconf_session,
        rpc_timeout: float = RPC_TIMEOUT
    ):
        """
        Initialize connection.

        Args:
            device: Device the client is connected to
            client: Connected paramiko.SSHClient
            netconf: Run commands as NETCONF RPCs instead of CLI commands
            session_factory: Builds a NETCONF session on a transport
            rpc_timeout: Seconds a NETCONF RPC may take
        """
        self._device = device
        self._client = client
        self._lock = threading.Lock()
        self._closed = threading.Event()

        self._strategy: ExecutionStrategy
        if netconf:
            self._strategy = NetconfStrategy(
                host=device.host,
                session_factory=session_factory,
                timeout=rpc_timeout
            )
        else:
            self._strategy = ShellStrategy(host=device.host)

        self.last_used: Optional[datetime] = None
        self.logger = logging.getLogger(f"{__name__}.{device.host}")

    @property
    def device(self) -> Device:
        return self._device

    @property
    def host(self) -> str:
        return self._device.host

    @property
    def mode(self) -> str:
        return self._strategy.name

    @property
    def netconf_session(self):
        """Current NETCONF session, None until the first RPC or after a loss"""
        return self._strategy.session

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def run_command(self, command: str) -> bytes:
        """
        Run a command on the device.

        Args:
            command: CLI command or NETCONF operation, depending on mode

        Returns:
            Raw reply bytes

        Raises:
            NotConnectedError: If the connection has no client
            ConnectorError: Subclass describing the failure
        """
        with self._lock:
            self.last_used = datetime.now(timezone.utc)

            if self._client is None:
                raise NotConnectedError("not connected", host=self.host)

            transport = self._client.get_transport()
            if transport is None:
                raise NotConnectedError("transport is gone", host=self.host)

            return self._strategy.execute(transport, command)

    def is_connected(self) -> bool:
        """
        Check whether a client is attached.

        Not synchronised with running commands; advisory only.
        """
        return self._client is not None

    def is_idle(self, idle_timeout: timedelta, now: Optional[datetime] = None) -> bool:
        """Check whether the connection has not been used for idle_timeout"""
        if self.last_used is None:
            return False

        if now is None:
            now = datetime.now(timezone.utc)

        return now - self.last_used > idle_timeout

    def terminate(self):
        """
        Drop the connection without a graceful shutdown.

        Used for unresponsive devices. Does not emit the close notification.
        """
        with self._lock:
            self._strategy.reset(graceful=False)

            if self._client is not None:
                try:
                    self._client.close()
                except Exception as e:
                    self.logger.warning(f"Error terminating connection to {self.host}: {e}")

            self._client = None
            self.logger.info(f"Connection to {self.host} terminated")

    def close(self):
        """
        Close the connection and notify waiters exactly once.

        Calling close again is a no-op.
        """
        with self._lock:
            if self._closed.is_set():
                return

            self._strategy.reset(graceful=True)

            if self._client is not None:
                try:
                    self._client.close()
                except Exception as e:
                    self.logger.warning(f"Error closing connection to {self.host}: {e}")

            self._client = None
            self._closed.set()
            self.logger.info(f"Connection to {self.host} closed")

    def wait_closed(self, timeout: Optional[float] = None) -> bool:
        """
        Block until close() was called.

        Returns:
            True if the connection was closed, False on timeout
        """
        return self._closed.wait(timeout)
