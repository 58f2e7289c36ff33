"""
junos_exporter: Prometheus exporter for Juniper Junos devices

Runs status commands against Junos devices over SSH (CLI with XML output)
or NETCONF and exposes the decoded results as Prometheus metrics.
"""

from .__version__ import __version__

__all__ = [
    '__version__',
    'connector',
    'rpc',
    'collectors',
    'logging',
    'utils'
]
