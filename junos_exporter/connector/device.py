"""
Device

Identity and credentials of a Junos target.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Device:
    """A device to connect to. Immutable once handed to a connection."""
    host: str
    port: int = 22
    username: str = ""
    password: Optional[str] = None
    key_file: Optional[str] = None

    def __str__(self) -> str:
        return self.host
