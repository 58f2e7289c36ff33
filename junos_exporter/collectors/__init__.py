"""
Collectors Module

Turns decoded command replies into Prometheus metrics.

Usage:
    from prometheus_client import REGISTRY
    from junos_exporter.collectors import AlarmCollector, JunosCollector

    REGISTRY.register(JunosCollector({'router1': client}, [AlarmCollector()]))
"""

from .base import RPCCollector
from .alarm import AlarmCollector, AlarmResult, AlarmDetail
from .exporter import JunosCollector

__all__ = [
    'RPCCollector',
    'AlarmCollector',
    'AlarmResult',
    'AlarmDetail',
    'JunosCollector'
]
