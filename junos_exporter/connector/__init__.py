"""
Device Connector Module

Owns the SSH connection to a device and runs commands on it:
- Device: target identity and credentials
- SSHConnection: serialised command execution over CLI or NETCONF
- connect: opens the authenticated SSH client

Usage:
    from junos_exporter.connector import Device, SSHConnection, connect

    device = Device(host='router1', username='exporter', key_file='id_ed25519')
    conn = SSHConnection(device, connect(device), netconf=True)
    reply = conn.run_command('get-alarm-information')
"""

from .device import Device
from .connection import SSHConnection
from .transport import connect, load_private_key

__all__ = [
    'Device',
    'SSHConnection',
    'connect',
    'load_private_key'
]
