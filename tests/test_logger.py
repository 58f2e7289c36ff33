"""
Tests for structured logging
"""

import json
import logging
import sys
from unittest.mock import patch

from junos_exporter.logging import StructuredFormatter, configure_logging, get_logger


def make_record(**extra):
    record = logging.LogRecord(
        name='junos_exporter.rpc.client',
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg="Running command on %s",
        args=('router1',),
        exc_info=None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_outputs_json():
    output = StructuredFormatter("exporter-a").format(make_record())
    data = json.loads(output)

    assert data['level'] == 'INFO'
    assert data['exporter_id'] == 'exporter-a'
    assert data['logger'] == 'junos_exporter.rpc.client'
    assert data['message'] == 'Running command on router1'
    assert data['line'] == 42
    assert 'exception' not in data


def test_formatter_includes_extra_fields():
    output = StructuredFormatter().format(make_record(extra_fields={'device': 'router1'}))

    assert json.loads(output)['device'] == 'router1'


def test_formatter_includes_exception():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = make_record()
        record.exc_info = sys.exc_info()

    data = json.loads(StructuredFormatter().format(record))

    assert 'RuntimeError: boom' in data['exception']


def test_get_logger_configures_once():
    logger = get_logger('junos_exporter.tests.once')
    get_logger('junos_exporter.tests.once')

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
    assert logger.propagate is False


def test_configure_logging_from_yaml(tmp_path):
    path = tmp_path / 'logging.yml'
    path.write_text(
        "version: 1\n"
        "handlers:\n"
        "  file:\n"
        "    class: logging.FileHandler\n"
        f"    filename: {tmp_path / 'logs' / 'exporter.log'}\n"
    )

    with patch('logging.config.dictConfig') as mock_dict_config:
        assert configure_logging(str(path)) is True

    config = mock_dict_config.call_args[0][0]
    assert config['version'] == 1
    assert (tmp_path / 'logs').is_dir()


def test_configure_logging_fallback(tmp_path):
    with patch('logging.basicConfig') as mock_basic_config:
        assert configure_logging(str(tmp_path / 'absent.yml'), default_level=logging.DEBUG) is False

    kwargs = mock_basic_config.call_args.kwargs
    assert kwargs['level'] == logging.DEBUG
    assert kwargs['force'] is True
    assert isinstance(kwargs['handlers'][0].formatter, StructuredFormatter)


def test_configure_logging_empty_file(tmp_path):
    path = tmp_path / 'logging.yml'
    path.write_text("")

    with patch('logging.basicConfig') as mock_basic_config:
        assert configure_logging(str(path)) is False

    mock_basic_config.assert_called_once()
