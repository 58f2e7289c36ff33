"""
Junos Collector

prometheus_client custom collector that scrapes every configured device
with the enabled RPC collectors.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterator, List, Tuple
import logging
import time

from prometheus_client.core import GaugeMetricFamily, Metric

from junos_exporter.exceptions import ConnectorError
from .base import RPCCollector


logger = logging.getLogger(__name__)


class JunosCollector:
    """
    Scrapes all targets in parallel.

    Commands to one device are serialised by its connection, so one
    worker per device is enough.
    """

    def __init__(
        self,
        clients: Dict[str, object],
        collectors: List[RPCCollector],
        max_workers: int = 16
    ):
        """
        Initialize collector.

        Args:
            clients: Target name -> rpc.Client
            collectors: RPC collectors to run against every target
            max_workers: Maximum devices scraped at the same time
        """
        self.clients = clients
        self.collectors = collectors
        self.max_workers = max_workers

    def describe(self) -> Iterator[Metric]:
        up, duration = self._families()
        yield up
        yield duration

        for collector in self.collectors:
            yield from collector.describe()

    def collect(self) -> Iterator[Metric]:
        up, duration = self._families()
        merged: Dict[str, Metric] = {}

        if self.clients:
            workers = min(self.max_workers, len(self.clients))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = pool.map(self._scrape_target, self.clients.items())

                for target, success, durations, families in results:
                    up.add_metric([target], 1 if success else 0)

                    for name, seconds in durations:
                        duration.add_metric([target, name], seconds)

                    for family in families:
                        if family.name in merged:
                            merged[family.name].samples.extend(family.samples)
                        else:
                            merged[family.name] = family

        yield up
        yield duration
        yield from merged.values()

    def _scrape_target(self, item) -> Tuple[str, bool, List[Tuple[str, float]], List[Metric]]:
        target, client = item
        durations = []
        families = []

        if not client.connection.is_connected():
            logger.warning(f"Skipping {target}: not connected")
            return target, False, durations, families

        success = True
        for collector in self.collectors:
            started = time.monotonic()
            try:
                families.extend(collector.collect(client, [target]))
            except ConnectorError as e:
                logger.error(f"{collector.name()} collector failed for {target}: {e}")
                success = False
            except Exception as e:
                # Custom parsers raise their own error types
                logger.exception(
                    f"{collector.name()} collector failed for {target}: {type(e).__name__}: {e}"
                )
                success = False
            durations.append((collector.name(), time.monotonic() - started))

        return target, success, durations, families

    def _families(self):
        up = GaugeMetricFamily(
            "junos_up",
            "Scrape of target was successful",
            labels=["target"]
        )
        duration = GaugeMetricFamily(
            "junos_collector_duration_seconds",
            "Duration of a collector scrape for one target",
            labels=["target", "collector"]
        )
        return up, duration
