"""
Structured Logging

JSON-formatted log entries for the exporter. Every entry carries the
exporter instance id; device-related entries add a "device" field via
extra_fields.
"""

import logging
import logging.config
import json
import os
from datetime import datetime, timezone
from typing import Optional

import yaml


class StructuredFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per log entry"""

    def __init__(self, exporter_id: str = "junos_exporter"):
        super().__init__()
        self.exporter_id = exporter_id

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "exporter_id": self.exporter_id,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # e.g. {'device': 'router1'} from the RPC client
        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


def get_logger(name: str, exporter_id: str = "junos_exporter", level: int = logging.INFO) -> logging.Logger:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically module name)
        exporter_id: ID of the exporter instance
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Scrape done", extra={'extra_fields': {'device': 'router1'}})
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        logger.setLevel(level)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(StructuredFormatter(exporter_id))

        logger.addHandler(console_handler)
        logger.propagate = False

    return logger


def configure_logging(
    config_path: Optional[str] = None,
    default_level: int = logging.INFO,
    exporter_id: str = "junos_exporter"
) -> bool:
    """
    Configure logging from a YAML dictConfig file.

    Without a usable file the root logger gets a structured console handler.

    Args:
        config_path: Path to YAML logging config
        default_level: Log level for the fallback config
        exporter_id: Exporter id written by the fallback formatter

    Returns:
        True if YAML config loaded, False otherwise
    """
    if config_path and os.path.isfile(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                config = yaml.safe_load(handle)

            if not config:
                raise ValueError("Logging config is empty")

            for handler in config.get("handlers", {}).values():
                filename = handler.get("filename")
                if filename:
                    os.makedirs(os.path.dirname(filename), exist_ok=True)

            logging.config.dictConfig(config)
            return True
        except (OSError, ValueError, yaml.YAMLError) as e:
            _configure_console(default_level, exporter_id)
            logging.getLogger(__name__).warning(f"Invalid logging config {config_path}: {e}")
            return False

    _configure_console(default_level, exporter_id)
    return False


def _configure_console(level: int, exporter_id: str):
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(exporter_id))
    logging.basicConfig(level=level, handlers=[handler], force=True)
