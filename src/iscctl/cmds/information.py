"""Identity, version, uptime and controller temperature."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ..common.errors import ReplyFormatError
from ..common.types import Seconds, Temperature, parse_int, parse_text
from .base import Command, Response
from .basic import TemperatureReading
from .registry import columns, register


@dataclass(frozen=True)
class Identity(Response):
    manufacturer: str
    board: str
    serial_number: str

    def describe(self) -> str:
        return f"{self.manufacturer} {self.board}, serial {self.serial_number}"


@dataclass(frozen=True)
class Uptime(Response):
    uptime: Seconds

    def describe(self) -> str:
        s = int(self.uptime)
        return f"uptime {s // 3600}h {s % 3600 // 60}m {s % 60}s"


@dataclass(frozen=True)
class Version(Response):
    manufacturer_id: int
    major: int
    minor: int
    build: int
    hotfix: Optional[int]
    date: str
    time: str

    def describe(self) -> str:
        ver = f"{self.major}.{self.minor}.{self.build}"
        if self.hotfix is not None:
            ver += f".{self.hotfix}"
        return f"firmware {ver} ({self.date} {self.time}), manufacturer id {self.manufacturer_id}"


def _identity_reply(command: Command, parts: List[str]) -> Identity:
    words = parts[2].split()
    if len(words) != 2:
        raise ReplyFormatError(f"expected '<manufacturer> <board>', got {parts[2]!r}")
    return Identity(command, words[0], words[1], parse_text(parts[3]))


def _version_reply(command: Command, parts: List[str]) -> Version:
    nums = [parse_int(p) for p in parts[2:-2]]
    hotfix = nums[4] if len(nums) == 5 else None
    return Version(command, nums[0], nums[1], nums[2], nums[3], hotfix, parse_text(parts[-2]), parse_text(parts[-1]))


@register("$IDN", fields=4, reply=_identity_reply)
@dataclass(frozen=True)
class GetIdentity(Command):
    """Manufacturer, board name and serial number."""


@register("$TCG", fields=3, reply=columns(TemperatureReading, Temperature.from_wire))
@dataclass(frozen=True)
class GetISCTemp(Command):
    """Controller board temperature."""


@register("$RTG", fields=3, reply=columns(Uptime, Seconds.from_wire))
@dataclass(frozen=True)
class GetUptime(Command):
    """Seconds since the controller started."""


# OK,ch,manufacturer,major,minor,build[,hotfix],date,time
@register("$VER", fields=(8, 9), reply=_version_reply)
@dataclass(frozen=True)
class GetVersion(Command):
    """Firmware version and build date."""
