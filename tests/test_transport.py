"""
Tests for SSH client setup and key loading
"""

import io
from unittest.mock import MagicMock, patch

import paramiko
import pytest

from junos_exporter.connector import Device, connect, load_private_key


@pytest.fixture(scope="module")
def rsa_key_text():
    key = paramiko.RSAKey.generate(2048)
    buf = io.StringIO()
    key.write_private_key(buf)
    return buf.getvalue()


class TestLoadPrivateKey:

    def test_loads_rsa_key(self, rsa_key_text):
        key = load_private_key(io.StringIO(rsa_key_text))
        assert isinstance(key, paramiko.RSAKey)

    def test_garbage(self):
        with pytest.raises(ValueError, match="could not parse private key"):
            load_private_key(io.StringIO("not a key"))

    def test_unreadable_stream(self):
        stream = MagicMock()
        stream.read.side_effect = OSError("permission denied")

        with pytest.raises(ValueError, match="could not read from reader"):
            load_private_key(stream)


class TestConnect:

    @patch('junos_exporter.connector.transport.paramiko.SSHClient')
    def test_password_login(self, mock_client_cls):
        device = Device(host='router1', port=2222, username='exporter', password='secret')

        client = connect(device, timeout=5, keepalive_interval=20)

        assert client is mock_client_cls.return_value
        kwargs = client.connect.call_args.kwargs
        assert kwargs['hostname'] == 'router1'
        assert kwargs['port'] == 2222
        assert kwargs['password'] == 'secret'
        assert kwargs['pkey'] is None
        assert kwargs['timeout'] == 5
        client.get_transport.return_value.set_keepalive.assert_called_once_with(20)

    @patch('junos_exporter.connector.transport.paramiko.SSHClient')
    def test_key_file_login(self, mock_client_cls, tmp_path, rsa_key_text):
        key_file = tmp_path / 'id_rsa'
        key_file.write_text(rsa_key_text)
        device = Device(host='router1', username='exporter', key_file=str(key_file))

        client = connect(device, keepalive_interval=0)

        assert isinstance(client.connect.call_args.kwargs['pkey'], paramiko.RSAKey)
        client.get_transport.return_value.set_keepalive.assert_not_called()
