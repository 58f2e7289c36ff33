"""
Exporter Configuration

Typed view of the YAML configuration file:

    netconf: false
    alarm_filter: "Management Ethernet"
    devices:
      - host: router1
        username: exporter
        key_file: /etc/junos_exporter/id_ed25519
      - host: router2
        username: exporter
        password: secret
        netconf: true
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from junos_exporter.connector import Device
from junos_exporter.connector.netconf import RPC_TIMEOUT
from junos_exporter.utils.config_loader import ConfigLoader


ENV_PREFIX = "JUNOS_EXPORTER_"


@dataclass
class DeviceConfig:
    device: Device
    netconf: bool = False
    satellite: bool = False


@dataclass
class ExporterConfig:
    devices: List[DeviceConfig] = field(default_factory=list)
    netconf: bool = False
    satellite: bool = False
    debug: bool = False
    rpc_timeout: float = RPC_TIMEOUT
    ssh_timeout: float = 30
    keepalive_interval: int = 10
    listen_address: str = "0.0.0.0"
    listen_port: int = 9326
    alarm_filter: str = ""
    features: Dict[str, bool] = field(default_factory=lambda: {'alarm': True})
    logging_config: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ExporterConfig":
        """
        Build configuration from a parsed YAML mapping.

        Raises:
            ValueError: If a device entry is invalid
        """
        netconf = bool(raw.get('netconf', False))
        satellite = bool(raw.get('satellite', False))

        devices = []
        for entry in raw.get('devices') or []:
            if not isinstance(entry, dict) or not entry.get('host'):
                raise ValueError(f"Device entry needs a host: {entry}")

            device = Device(
                host=str(entry['host']),
                port=int(entry.get('port', 22)),
                username=str(entry.get('username', '')),
                password=entry.get('password'),
                key_file=entry.get('key_file')
            )

            if not device.password and not device.key_file:
                raise ValueError(f"Device {device.host} needs a password or key_file")

            devices.append(DeviceConfig(
                device=device,
                netconf=bool(entry.get('netconf', netconf)),
                satellite=bool(entry.get('satellite', satellite))
            ))

        features = {'alarm': True}
        features.update(raw.get('features') or {})

        return cls(
            devices=devices,
            netconf=netconf,
            satellite=satellite,
            debug=bool(raw.get('debug', False)),
            rpc_timeout=float(raw.get('rpc_timeout', RPC_TIMEOUT)),
            ssh_timeout=float(raw.get('ssh_timeout', 30)),
            keepalive_interval=int(raw.get('keepalive_interval', 10)),
            listen_address=str(raw.get('listen_address', "0.0.0.0")),
            listen_port=int(raw.get('listen_port', 9326)),
            alarm_filter=str(raw.get('alarm_filter') or ""),
            features=features,
            logging_config=raw.get('logging_config')
        )


def load_config(config_path: str) -> ExporterConfig:
    """Load the exporter configuration, applying JUNOS_EXPORTER_* overrides"""
    raw = ConfigLoader.load_with_env_override(
        config_path,
        env_prefix=ENV_PREFIX,
        required_keys=['devices']
    )
    return ExporterConfig.from_dict(raw)
