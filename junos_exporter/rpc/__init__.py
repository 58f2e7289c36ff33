"""
RPC Module

Uniform "run a command, get structured data" access to a device.
"""

from .client import Client, Parser

__all__ = [
    'Client',
    'Parser'
]
