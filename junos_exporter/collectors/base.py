"""
Base Collector Interface

Defines the contract that all RPC collectors must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from prometheus_client.core import Metric


class RPCCollector(ABC):
    """
    Base class for collectors that turn command replies into metrics.

    A collector knows which commands to send (per dialect) and how to
    read the decoded replies. The exporter calls it once per target and
    merges the returned families across targets.
    """

    @abstractmethod
    def name(self) -> str:
        """Name of the collector, used in duration metrics and logs"""

    @abstractmethod
    def describe(self) -> List[Metric]:
        """
        Describe the metrics this collector emits.

        Returns:
            Metric families without samples
        """

    @abstractmethod
    def collect(self, client, label_values: List[str]) -> List[Metric]:
        """
        Collect metrics from one device.

        Args:
            client: rpc.Client of the device
            label_values: Values of the target labels, prepended to every sample

        Returns:
            Metric families with samples for this device
        """
