"""
Tests for the command line entry point (no real device connections)
"""

from unittest.mock import patch

import pytest

from junos_exporter.collectors import AlarmCollector
from junos_exporter.config import ExporterConfig
from junos_exporter.logging import StructuredFormatter
from junos_exporter.main import TRACE_LOGGER, build_collectors, connect_devices, main, parse_args

from conftest import FakeSSHClient, FakeTransport


@pytest.fixture
def config():
    return ExporterConfig.from_dict({
        'alarm_filter': 'PEM',
        'devices': [
            {'host': 'router1', 'username': 'exporter', 'password': 'x'},
            {'host': 'router2', 'username': 'exporter', 'password': 'x', 'netconf': True},
        ]
    })


def test_parse_args():
    args = parse_args(['--config', 'config.yml', '--debug', '--listen-port', '9100'])

    assert args.config == 'config.yml'
    assert args.debug
    assert args.listen_port == 9100


def test_build_collectors(config):
    collectors = build_collectors(config)

    assert len(collectors) == 1
    assert isinstance(collectors[0], AlarmCollector)
    assert collectors[0].filter.pattern == 'PEM'


def test_build_collectors_disabled(config):
    config.features['alarm'] = False
    assert build_collectors(config) == []


@patch('junos_exporter.main.connect')
def test_connect_devices_skips_unreachable(mock_connect, config):
    mock_connect.side_effect = [FakeSSHClient(FakeTransport()), OSError("No route to host")]

    clients = connect_devices(config)

    assert list(clients) == ['router1']
    assert not clients['router1'].is_netconf_enabled()
    assert clients['router1'].connection.is_connected()


@patch('junos_exporter.main.connect')
def test_connect_devices_netconf(mock_connect, config):
    mock_connect.return_value = FakeSSHClient(FakeTransport())

    clients = connect_devices(config)

    assert clients['router2'].is_netconf_enabled()
    assert clients['router2'].connection.mode == 'netconf'


def test_main_invalid_config(tmp_path, capsys):
    path = tmp_path / 'config.yml'
    path.write_text("netconf: true\n")

    assert main(['--config', str(path)]) == 1
    assert 'Invalid configuration' in capsys.readouterr().err


@patch('junos_exporter.main.connect')
def test_debug_uses_structured_trace_logger(mock_connect, config):
    mock_connect.return_value = FakeSSHClient(FakeTransport())
    config.debug = True

    clients = connect_devices(config)

    trace_logger = clients['router1'].logger
    assert trace_logger.name == TRACE_LOGGER
    assert isinstance(trace_logger.handlers[0].formatter, StructuredFormatter)
    assert clients['router2'].logger is trace_logger
