"""
NETCONF Session

Runs an ncclient NETCONF session on top of an SSH transport that is
already authenticated, so CLI and NETCONF traffic share one SSH
connection to the device.
"""

import logging

from ncclient.manager import Manager, make_device_handler
from ncclient.operations.errors import TimeoutExpiredError
from ncclient.transport import SSHSession
from ncclient.transport.errors import SessionCloseError, TransportError
from ncclient.xml_ import to_ele

from junos_exporter.envelope import unwrap_reply


logger = logging.getLogger(__name__)

NETCONF_SUBSYSTEM = "netconf"

# Seconds a single RPC may take before it is abandoned
RPC_TIMEOUT = 15


class ChannelSSHSession(SSHSession):
    """
    ncclient SSH session that owns a channel, not the transport.

    ncclient closes the session from its reader thread when the device
    drops the channel. The stock close() would take the shared SSH
    transport down with it.
    """

    def close(self):
        self._closing.set()

        channel, self._channel = self._channel, None
        if channel is not None:
            channel.close()

        self._connected = False


class NetconfSession:
    """
    A NETCONF session bound to one channel of an SSH transport.

    Failures are reported with built-in exception types:
    EOFError when the device closed the session, TimeoutError when a
    request ran past its deadline. Other errors propagate unchanged.
    """

    def __init__(self, manager: Manager, ssh_session: ChannelSSHSession, channel):
        self.manager = manager
        self.ssh_session = ssh_session
        self.channel = channel

    @property
    def connected(self) -> bool:
        return self.manager.connected

    def dispatch(self, request: str, timeout: float = RPC_TIMEOUT) -> bytes:
        """
        Send one RPC and return the body of its reply.

        Args:
            request: RPC element as XML, e.g. <get-alarm-information/>
            timeout: Seconds to wait for the reply

        Returns:
            Content of the <rpc-reply> element
        """
        self.manager.timeout = timeout

        try:
            reply = self.manager.dispatch(to_ele(request))
        except TimeoutExpiredError as e:
            raise TimeoutError(str(e)) from e
        except SessionCloseError as e:
            raise EOFError(str(e)) from e
        except TransportError as e:
            if not self.manager.connected:
                raise EOFError(str(e)) from e
            raise

        return unwrap_reply(reply.xml.encode('utf-8'))

    def close(self):
        """Close the NETCONF channel, leaving the SSH transport open"""
        self.ssh_session.close()


def open_netconf_session(transport, timeout: float = RPC_TIMEOUT) -> NetconfSession:
    """
    Start a NETCONF session on an authenticated paramiko transport.

    Follows what ncclient's SSHSession.connect does after authentication:
    open a channel, invoke the netconf subsystem and exchange hellos.

    Args:
        transport: Active paramiko.Transport
        timeout: Hello exchange and default RPC timeout in seconds

    Returns:
        Ready NetconfSession
    """
    device_handler = make_device_handler({'name': 'junos'})
    session = ChannelSSHSession(device_handler)

    channel = transport.open_session()
    channel_name = f"{NETCONF_SUBSYSTEM}-subsystem-{channel.get_id()}"
    channel.set_name(channel_name)

    try:
        channel.invoke_subsystem(NETCONF_SUBSYSTEM)

        session._transport = transport
        session._channel = channel
        session._channel_id = channel.get_id()
        session._channel_name = channel_name
        session._connected = True
        session._closing.clear()
        session._post_connect(timeout)
    except Exception:
        channel.close()
        raise

    logger.debug(f"NETCONF session {session.id} established on {channel_name}")

    return NetconfSession(Manager(session, device_handler, timeout=timeout), session, channel)
