"""
RPC Client

Sends commands to a Junos device and decodes the XML replies.

In CLI mode commands are sent with "| display xml" and the reply arrives
wrapped in <rpc-reply>, which is removed before decoding. In NETCONF mode
commands are RPC names and the connection already returns the reply body.
"""

from typing import Callable, Optional
import logging
import time

from junos_exporter.connector import Device, SSHConnection
from junos_exporter.envelope import decode_xml, strip_line_breaks, unwrap_reply
from junos_exporter.monitoring import track_rpc_command, track_rpc_latency


# Parses the body of a reply
Parser = Callable[[bytes], None]

DISPLAY_XML = "| display xml"


class ShellDialect:
    """CLI commands with XML output"""

    def wire_command(self, command: str) -> str:
        return f"{command} {DISPLAY_XML}"

    def unwrap(self, output: bytes, host: str) -> bytes:
        return unwrap_reply(output, host=host)

    def default_parser(self, target, host: str) -> Parser:
        return lambda body: decode_xml(body, target, host=host)


class NetconfDialect:
    """NETCONF operations; replies arrive unwrapped"""

    def wire_command(self, command: str) -> str:
        return command

    def unwrap(self, output: bytes, host: str) -> bytes:
        return output

    def default_parser(self, target, host: str) -> Parser:
        # Junos puts line breaks inside values of NETCONF replies
        return lambda body: decode_xml(strip_line_breaks(body), target, host=host)


class Client:
    """
    Sends commands to a device and parses the results.

    Collectors use is_netconf_enabled() and is_satellite_enabled() to pick
    the commands they send.
    """

    def __init__(
        self,
        connection: SSHConnection,
        netconf: bool = False,
        satellite: bool = False,
        debug: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize client.

        Args:
            connection: Connection to the device
            netconf: Commands are NETCONF operations
            satellite: Device has satellite devices attached
            debug: Log every command and its raw output
            logger: Logger for debug output
        """
        self.connection = connection
        self.netconf = netconf
        self.satellite = satellite
        self.debug = debug
        self.logger = logger or logging.getLogger(__name__)

        self._dialect = NetconfDialect() if netconf else ShellDialect()

    @property
    def device(self) -> Device:
        return self.connection.device

    def is_satellite_enabled(self) -> bool:
        return self.satellite

    def is_netconf_enabled(self) -> bool:
        return self.netconf

    def run_command_and_parse(self, command: str, target) -> None:
        """
        Run a command and decode the XML result into target.

        Args:
            command: CLI command or NETCONF operation
            target: Object exposing decode_xml(element)
        """
        parser = self._dialect.default_parser(target, self.connection.host)
        self.run_command_and_parse_with_parser(command, parser)

    def run_command_and_parse_with_parser(self, command: str, parser: Parser) -> None:
        """
        Run a command and hand the reply body to a parser.

        Errors from the connection and the parser propagate unchanged.

        Args:
            command: CLI command or NETCONF operation
            parser: Called with the reply body
        """
        host = self.connection.host
        log_fields = {'extra_fields': {'device': host}}

        if self.debug:
            self.logger.info(f"Running command on {host}: {command}", extra=log_fields)

        wire_command = self._dialect.wire_command(command)

        started = time.monotonic()
        try:
            output = self.connection.run_command(wire_command)
        except Exception as e:
            track_rpc_command(host, self.connection.mode, type(e).__name__)
            raise
        finally:
            track_rpc_latency(host, self.connection.mode, time.monotonic() - started)

        track_rpc_command(host, self.connection.mode, "success")

        if self.debug:
            self.logger.info(
                f"Output for {host}: {output.decode('utf-8', errors='replace')}",
                extra=log_fields
            )

        body = self._dialect.unwrap(output, host)
        parser(body)
