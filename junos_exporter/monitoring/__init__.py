"""
Monitoring utilities for the exporter itself.
"""

from .metrics import (
    start_metrics_server,
    track_rpc_command,
    track_rpc_latency
)

__all__ = [
    "start_metrics_server",
    "track_rpc_command",
    "track_rpc_latency"
]
