"""
SSH Transport

Establishes the authenticated SSH client a connection runs on.
"""

import io
import logging
from typing import IO, Optional

import paramiko

from .device import Device


logger = logging.getLogger(__name__)

# Key types tried in order when loading a private key
KEY_TYPES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


def load_private_key(stream: IO[str], passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Load a private key from a text stream.

    Args:
        stream: Readable stream with the PEM/OpenSSH encoded key
        passphrase: Optional key passphrase

    Returns:
        Parsed paramiko key

    Raises:
        ValueError: If the stream cannot be read or holds no supported key
    """
    try:
        data = stream.read()
    except OSError as e:
        raise ValueError(f"could not read from reader: {e}") from e

    for key_type in KEY_TYPES:
        try:
            return key_type.from_private_key(io.StringIO(data), password=passphrase)
        except paramiko.SSHException:
            continue

    raise ValueError("could not parse private key")


def connect(
    device: Device,
    timeout: float = 30,
    keepalive_interval: int = 10
) -> paramiko.SSHClient:
    """
    Open an authenticated SSH client to a device.

    Password authentication is used when the device has a password,
    otherwise the device's key file is loaded.

    Args:
        device: Device to connect to
        timeout: TCP and authentication timeout in seconds
        keepalive_interval: Seconds between SSH keepalives (0 disables)

    Returns:
        Connected paramiko SSHClient
    """
    pkey = None
    if device.key_file and not device.password:
        with open(device.key_file, 'r') as f:
            pkey = load_private_key(f)

    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    logger.info(f"Connecting to {device.host}:{device.port} as {device.username}")

    client.connect(
        hostname=device.host,
        port=device.port,
        username=device.username,
        password=device.password,
        pkey=pkey,
        timeout=timeout,
        auth_timeout=timeout,
        allow_agent=False,
        look_for_keys=False
    )

    if keepalive_interval:
        client.get_transport().set_keepalive(keepalive_interval)

    logger.info(f"✓ Connected to {device.host}")
    return client
