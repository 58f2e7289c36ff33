"""
Prometheus self-monitoring metrics for the exporter.
"""

from prometheus_client import Counter, Histogram, start_http_server

_metrics_started = False

rpc_commands_total = Counter(
    "junos_exporter_rpc_commands_total",
    "Total commands sent to devices",
    ["target", "mode", "status"]
)

rpc_command_latency_seconds = Histogram(
    "junos_exporter_rpc_command_latency_seconds",
    "Command round trip time in seconds",
    ["target", "mode"]
)


def start_metrics_server(port: int = 9326, addr: str = "0.0.0.0"):
    """Start Prometheus metrics server if not already running."""
    global _metrics_started

    if _metrics_started:
        return

    start_http_server(port, addr=addr)
    _metrics_started = True


def track_rpc_command(target: str, mode: str, status: str):
    """Track command count by target, mode, and outcome."""
    rpc_commands_total.labels(target=target, mode=mode, status=status).inc()


def track_rpc_latency(target: str, mode: str, duration_seconds: float):
    """Track command latency."""
    rpc_command_latency_seconds.labels(target=target, mode=mode).observe(duration_seconds)
