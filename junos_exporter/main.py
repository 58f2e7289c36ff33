"""
junos_exporter Entry Point

Usage:
    junos-exporter --config /etc/junos_exporter/config.yml
    junos-exporter --config config.yml --debug --listen-port 9100
"""

import argparse
import logging
import signal
import sys
import threading
from typing import Dict, List

import paramiko
import yaml
from prometheus_client import REGISTRY

from junos_exporter import __version__
from junos_exporter.collectors import AlarmCollector, JunosCollector, RPCCollector
from junos_exporter.config import ExporterConfig, load_config
from junos_exporter.connector import SSHConnection, connect
from junos_exporter.logging.logger import configure_logging, get_logger
from junos_exporter.monitoring import start_metrics_server
from junos_exporter.rpc import Client


logger = logging.getLogger(__name__)

# Command and raw output tracing for --debug
TRACE_LOGGER = "junos_exporter.trace"


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Prometheus exporter for Junos devices',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--config',
        required=True,
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Log every command and its raw output'
    )

    parser.add_argument(
        '--listen-port',
        type=int,
        help='Port for the metrics endpoint (overrides config)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser.parse_args(argv)


def build_collectors(config: ExporterConfig) -> List[RPCCollector]:
    """Instantiate the RPC collectors enabled in the config"""
    collectors: List[RPCCollector] = []

    if config.features.get('alarm', True):
        collectors.append(AlarmCollector(config.alarm_filter))

    return collectors


def connect_devices(config: ExporterConfig) -> Dict[str, Client]:
    """
    Connect to every configured device.

    Devices that cannot be reached are logged and left out.
    """
    clients: Dict[str, Client] = {}
    trace_logger = get_logger(TRACE_LOGGER) if config.debug else None

    for device_config in config.devices:
        device = device_config.device

        try:
            ssh_client = connect(
                device,
                timeout=config.ssh_timeout,
                keepalive_interval=config.keepalive_interval
            )
        except (paramiko.SSHException, OSError, ValueError) as e:
            logger.error(f"Could not connect to {device.host}: {e}")
            continue

        connection = SSHConnection(
            device,
            ssh_client,
            netconf=device_config.netconf,
            rpc_timeout=config.rpc_timeout
        )

        clients[device.host] = Client(
            connection,
            netconf=device_config.netconf,
            satellite=device_config.satellite,
            debug=config.debug,
            logger=trace_logger
        )

    return clients


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    if args.debug:
        config.debug = True
    if args.listen_port:
        config.listen_port = args.listen_port

    configure_logging(
        config.logging_config,
        default_level=logging.DEBUG if config.debug else logging.INFO
    )

    logger.info(f"junos_exporter v{__version__} starting with {len(config.devices)} devices")

    clients = connect_devices(config)
    REGISTRY.register(JunosCollector(clients, build_collectors(config)))

    start_metrics_server(config.listen_port, addr=config.listen_address)
    logger.info(f"Serving metrics on {config.listen_address}:{config.listen_port}")

    stop = threading.Event()

    def _shutdown(signum, frame):
        logger.info(f"Received signal {signum}, shutting down")
        stop.set()

    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    stop.wait()

    for client in clients.values():
        client.connection.close()

    logger.info("All connections closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
