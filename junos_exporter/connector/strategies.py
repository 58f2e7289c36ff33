"""
Execution Strategies

How a command reaches the device. A connection picks one strategy when
it is created:
- ShellStrategy: one SSH exec channel per command
- NetconfStrategy: one long-lived NETCONF session, rebuilt after loss
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import logging

from paramiko import SSHException

from junos_exporter.exceptions import (
    CommandFailedError,
    CommandTimeoutError,
    SessionLostError,
    SessionSetupError,
)
from .netconf import RPC_TIMEOUT, open_netconf_session


class ExecutionStrategy(ABC):
    """Runs commands on a transport. Callers hold the connection lock."""

    name: str = "generic"

    def __init__(self, host: Optional[str] = None):
        self.host = host
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def session(self):
        """Long-lived protocol session, if the strategy keeps one"""
        return None

    @abstractmethod
    def execute(self, transport, command: str) -> bytes:
        """
        Run a command.

        Args:
            transport: Active SSH transport of the connection
            command: Command in the strategy's dialect

        Returns:
            Raw reply bytes
        """

    def reset(self, graceful: bool = True):
        """Drop any state tied to the transport"""


class ShellStrategy(ExecutionStrategy):
    """Runs each command on a fresh SSH exec channel"""

    name = "ssh"

    def execute(self, transport, command: str) -> bytes:
        try:
            channel = transport.open_session()
        except (SSHException, EOFError, OSError) as e:
            raise CommandFailedError(f"could not open session: {e}", host=self.host) from e

        with channel:
            try:
                channel.set_combine_stderr(False)
                channel.exec_command(command)
                output = channel.makefile('rb').read()
                errors = channel.makefile_stderr('rb').read()
                status = channel.recv_exit_status()
            except (SSHException, EOFError, OSError) as e:
                raise CommandFailedError(f"could not run command: {e}", host=self.host) from e

        if errors:
            self.logger.debug(
                f"stderr from {self.host}: {errors.decode('utf-8', errors='replace').strip()}"
            )

        if status != 0:
            raise CommandFailedError(
                f"could not run command: exited with status {status}",
                host=self.host
            )

        return output


def build_request(command: str) -> str:
    """
    Build a single-operation RPC from a command.

    A bare operation name becomes an empty element; a command that is
    already an XML element is sent as is.
    """
    command = command.strip()
    if command.startswith('<'):
        return command
    return f"<{command}/>"


class NetconfStrategy(ExecutionStrategy):
    """Runs commands as RPCs on a lazily opened NETCONF session"""

    name = "netconf"

    def __init__(
        self,
        host: Optional[str] = None,
        session_factory: Callable = open_netconf_session,
        timeout: float = RPC_TIMEOUT
    ):
        super().__init__(host)
        self.session_factory = session_factory
        self.timeout = timeout
        self._session = None

    @property
    def session(self):
        return self._session

    def execute(self, transport, command: str) -> bytes:
        if self._session is None:
            try:
                self._session = self.session_factory(transport, timeout=self.timeout)
            except Exception as e:
                raise SessionSetupError(
                    f"could not open netconf session: {e}",
                    host=self.host
                ) from e

        request = build_request(command)

        try:
            return self._session.dispatch(request, timeout=self.timeout)
        except EOFError as e:
            self.logger.warning(f"NETCONF session to {self.host} lost, closing to force a reopen")
            self.reset()
            raise SessionLostError(f"could not run command: {e}", host=self.host) from e
        except TimeoutError as e:
            raise CommandTimeoutError(
                f"no reply within {self.timeout}s: {e}",
                host=self.host
            ) from e
        except Exception as e:
            raise CommandFailedError(f"could not run command: {e}", host=self.host) from e

    def reset(self, graceful: bool = True):
        session, self._session = self._session, None

        if session is None or not graceful:
            return

        try:
            session.close()
        except Exception as e:
            self.logger.warning(f"Error closing NETCONF session to {self.host}: {e}")
