"""
Shared fixtures: in-memory stand-ins for the paramiko client, transport,
exec channels and NETCONF sessions.
"""

import io
import threading
import time

import pytest

from junos_exporter.connector import Device, SSHConnection
from junos_exporter.rpc import Client


class FakeChannel:
    """Exec channel returning a canned reply"""

    def __init__(self, transport):
        self.transport = transport
        self.command = None
        self.output = b""
        self.errors = b""
        self.status = 0
        self.combine_stderr = None
        self.stderr_read = False
        self.closed = False

    def set_combine_stderr(self, combine):
        self.combine_stderr = combine

    def exec_command(self, command):
        self.command = command
        self.transport.enter(command)
        try:
            if self.transport.delay:
                time.sleep(self.transport.delay)
            result = self.transport.reply(command)
        finally:
            self.transport.leave()

        if isinstance(result, Exception):
            raise result
        self.output, self.status = result[:2]
        if len(result) > 2:
            self.errors = result[2]

    def makefile(self, mode):
        return io.BytesIO(self.output)

    def makefile_stderr(self, mode):
        self.stderr_read = True
        return io.BytesIO(self.errors)

    def recv_exit_status(self):
        return self.status

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FakeTransport:
    """
    Transport recording commands and overlapping executions.

    replies maps a command to (output, status), (output, status, stderr)
    or an exception;
    unknown commands return (default_output, 0).
    """

    def __init__(self, replies=None, default_output=b"", delay=0.0):
        self.replies = replies or {}
        self.default_output = default_output
        self.delay = delay
        self.open_error = None
        self.channels = []
        self.commands = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def open_session(self):
        if self.open_error is not None:
            raise self.open_error
        channel = FakeChannel(self)
        self.channels.append(channel)
        return channel

    def reply(self, command):
        return self.replies.get(command, (self.default_output, 0))

    def enter(self, command):
        with self._lock:
            self.commands.append(command)
            self.active += 1
            self.max_active = max(self.max_active, self.active)

    def leave(self):
        with self._lock:
            self.active -= 1


class FakeSSHClient:
    def __init__(self, transport):
        self.transport = transport
        self.close_count = 0

    def get_transport(self):
        return self.transport

    def close(self):
        self.close_count += 1


class FakeNetconfSession:
    """NETCONF session answering requests through a handler"""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []
        self.timeouts = []
        self.close_count = 0

    def dispatch(self, request, timeout=15):
        self.requests.append(request)
        self.timeouts.append(timeout)
        return self.handler(request)

    def close(self):
        self.close_count += 1


class FakeSessionFactory:
    """Counts NETCONF session setups; handler answers every request"""

    def __init__(self, handler=None):
        self.handler = handler or (lambda request: b"")
        self.calls = 0
        self.sessions = []
        self.error = None

    def __call__(self, transport, timeout=15):
        self.calls += 1
        if self.error is not None:
            raise self.error
        session = FakeNetconfSession(self.handler)
        self.sessions.append(session)
        return session


@pytest.fixture
def device():
    return Device(host='router1', username='exporter', password='secret')


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def ssh_client(transport):
    return FakeSSHClient(transport)


@pytest.fixture
def session_factory():
    return FakeSessionFactory()


@pytest.fixture
def shell_connection(device, ssh_client):
    return SSHConnection(device, ssh_client)


@pytest.fixture
def netconf_connection(device, ssh_client, session_factory):
    return SSHConnection(device, ssh_client, netconf=True, session_factory=session_factory)


@pytest.fixture
def shell_client(shell_connection):
    return Client(shell_connection)


@pytest.fixture
def netconf_client(netconf_connection):
    return Client(netconf_connection, netconf=True)
