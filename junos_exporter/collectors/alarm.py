"""
Alarm Collector

Counts active system and chassis alarms.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import re
import xml.etree.ElementTree as ET

from prometheus_client.core import GaugeMetricFamily, Metric

from junos_exporter.envelope import find_text, local_name
from .base import RPCCollector


PREFIX = "junos_alarms_"
TARGET_LABELS = ["target"]
DETAIL_LABELS = TARGET_LABELS + ["class", "type", "description"]

SHELL_COMMANDS = [
    "show system alarms",
    "show chassis alarms",
]

NETCONF_COMMANDS = [
    "get-system-alarm-information",
    "get-alarm-information",
]


@dataclass
class AlarmDetail:
    alarm_class: str
    description: str
    alarm_type: str


@dataclass
class AlarmResult:
    """Decoded <alarm-information> reply"""
    details: List[AlarmDetail] = field(default_factory=list)

    def decode_xml(self, element: ET.Element):
        if local_name(element.tag) != "alarm-information":
            raise ValueError(
                f"expected element <alarm-information> but have <{local_name(element.tag)}>"
            )

        for child in element:
            if local_name(child.tag) != "alarm-detail":
                continue

            self.details.append(AlarmDetail(
                alarm_class=find_text(child, "alarm-class"),
                description=find_text(child, "alarm-description"),
                alarm_type=find_text(child, "alarm-type")
            ))


@dataclass
class AlarmCounter:
    red: float = 0
    yellow: float = 0


class AlarmCollector(RPCCollector):
    """Collects alarm counters and the set of active alarms"""

    def __init__(self, alarms_filter: str = ""):
        """
        Initialize alarm collector.

        Args:
            alarms_filter: Regex; alarms whose description or type match
                           are not counted
        """
        self.filter: Optional[re.Pattern] = re.compile(alarms_filter) if alarms_filter else None

    def name(self) -> str:
        return "Alarm"

    def describe(self) -> List[Metric]:
        yellow, red, details = self._families()
        return [yellow, red, details]

    def collect(self, client, label_values: List[str]) -> List[Metric]:
        counter, alarms = self.alarm_counter(client)

        yellow, red, details = self._families()
        yellow.add_metric(label_values, counter.yellow)
        red.add_metric(label_values, counter.red)

        for alarm in alarms:
            details.add_metric(
                label_values + [alarm.alarm_class, alarm.alarm_type, alarm.description],
                1
            )

        return [yellow, red, details]

    def alarm_counter(self, client) -> Tuple[AlarmCounter, List[AlarmDetail]]:
        """
        Query alarms and count the unfiltered ones by class.

        Alarms reported by both commands are counted once.
        """
        commands = NETCONF_COMMANDS if client.is_netconf_enabled() else SHELL_COMMANDS

        counter = AlarmCounter()
        alarms: List[AlarmDetail] = []
        seen: Dict[str, AlarmDetail] = {}

        for command in commands:
            result = AlarmResult()
            client.run_command_and_parse(command, result)

            for detail in result.details:
                if detail.description in seen:
                    continue

                seen[detail.description] = detail
                alarms.append(detail)

                if self.should_filter_alarm(detail):
                    continue

                if detail.alarm_class == "Major":
                    counter.red += 1
                elif detail.alarm_class == "Minor":
                    counter.yellow += 1

        return counter, alarms

    def should_filter_alarm(self, alarm: AlarmDetail) -> bool:
        if self.filter is None:
            return False

        return bool(self.filter.search(alarm.description) or self.filter.search(alarm.alarm_type))

    def _families(self):
        yellow = GaugeMetricFamily(
            PREFIX + "yellow_count",
            "Number of yellow alarms (not silenced)",
            labels=TARGET_LABELS
        )
        red = GaugeMetricFamily(
            PREFIX + "red_count",
            "Number of red alarms (not silenced)",
            labels=TARGET_LABELS
        )
        details = GaugeMetricFamily(
            PREFIX + "set",
            "Alarm active with the details provided in labels",
            labels=DETAIL_LABELS
        )
        return yellow, red, details
