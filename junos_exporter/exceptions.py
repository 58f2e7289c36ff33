"""
Exporter Exceptions

Error kinds raised by the connector and RPC layers. Each error carries the
host it relates to so callers can attribute failures to a target.
"""

from typing import Optional


class ConnectorError(Exception):
    """Base class for all device communication errors"""

    def __init__(self, message: str, host: Optional[str] = None):
        super().__init__(message)
        self.host = host

    def __str__(self) -> str:
        message = super().__str__()
        if self.host:
            return f"{self.host}: {message}"
        return message


class NotConnectedError(ConnectorError):
    """Command attempted without a live transport"""


class SessionSetupError(ConnectorError):
    """NETCONF session could not be established on the transport"""


class SessionLostError(ConnectorError):
    """NETCONF session was closed by the remote end"""


class CommandTimeoutError(ConnectorError):
    """NETCONF request exceeded its deadline"""


class CommandFailedError(ConnectorError):
    """Generic execution or transport failure"""


class EnvelopeDecodeError(ConnectorError):
    """The rpc-reply wrapper of a CLI reply could not be parsed"""


class DecodeError(ConnectorError):
    """The reply payload could not be decoded into its target"""
