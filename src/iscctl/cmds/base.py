from __future__ import annotations

import functools
import typing
from dataclasses import dataclass, fields
from enum import Enum, IntEnum
from typing import Any, ClassVar, Dict, List, Optional

from ..common.errors import DeviceError, TransportErrorKind
from ..common.types import Channel, WireValue, coerce, to_wire

__all__ = [
    "Priority",
    "Message",
    "Command",
    "Response",
    "Acknowledgement",
    "TransportFailure",
    "DeviceFailure",
    "DecodeFailure",
]


class Priority(IntEnum):
    """Dispatch order inside one tick; higher goes first."""
    LOW = 0
    STANDARD = 1
    HIGH = 2
    IMMEDIATE = 3
    TERMINATION = 4


@functools.lru_cache(maxsize=None)
def _field_types(cls: type) -> Dict[str, Any]:
    hints = typing.get_type_hints(cls)
    out: Dict[str, Any] = {}
    for name, hint in hints.items():
        if typing.get_origin(hint) is typing.Union or type(hint).__name__ == "UnionType":
            args = [a for a in typing.get_args(hint) if a is not type(None)]
            hint = args[0] if len(args) == 1 else None
        out[name] = hint if isinstance(hint, type) else None
    return out


@dataclass(frozen=True)
class Command:
    """One protocol request. Subclasses add their arguments as fields, in wire order.

    Fields accept plain numbers (or strings) and are coerced into their
    declared types, so ``SetFrequency(frequency=2500)`` works. A channel of
    None means "use the session's default channel".
    """

    channel: Optional[Channel] = None

    # False for the few commands whose request carries no channel
    addressed: ClassVar[bool] = True

    def __post_init__(self) -> None:
        types = _field_types(type(self))
        for f in fields(self):
            val = getattr(self, f.name)
            if val is None:
                continue
            new = coerce(types.get(f.name), val)
            if new is not val:
                object.__setattr__(self, f.name, new)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def arguments(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "channel"}

    def wire_args(self) -> List[str]:
        """Request fields after the channel."""
        return [to_wire(v) for v in self.arguments().values()]


def _plain(value: Any) -> Any:
    if isinstance(value, WireValue):
        return value.value
    if isinstance(value, Enum):
        return value.name.lower()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Command):
        return value.kind
    if isinstance(value, DeviceError):
        return str(value)
    return value


@dataclass(frozen=True)
class Response:
    """Result of one Command; ``command`` is the request it answers."""

    command: Command

    ok: ClassVar[bool] = True

    @property
    def kind(self) -> str:
        return type(self).__name__

    def values(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "command"}

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"kind": self.kind, "command": self.command.kind, "ok": self.ok}
        out.update({k: _plain(v) for k, v in self.values().items()})
        return out

    def describe(self) -> str:
        vals = ", ".join(f"{k}={_plain(v)}" for k, v in self.values().items())
        return f"{self.command.kind}: {vals}" if vals else self.command.kind


@dataclass(frozen=True)
class Acknowledgement(Response):
    """Reply to a set/action command. ``raw`` is empty for no-reply commands."""

    raw: str = ""

    def describe(self) -> str:
        return f"{self.command.kind}: {self.raw or 'sent'}"


@dataclass(frozen=True)
class TransportFailure(Response):
    error: TransportErrorKind
    description: str

    ok: ClassVar[bool] = False

    def describe(self) -> str:
        return f"{self.command.kind}: transport {self.error.value} error: {self.description}"


@dataclass(frozen=True)
class DeviceFailure(Response):
    error: DeviceError
    raw: str

    ok: ClassVar[bool] = False

    def describe(self) -> str:
        return f"{self.command.kind}: device error {self.error}"


@dataclass(frozen=True)
class DecodeFailure(Response):
    raw: str
    reason: str

    ok: ClassVar[bool] = False

    def describe(self) -> str:
        return f"{self.command.kind}: could not decode {self.raw!r}: {self.reason}"


@dataclass(frozen=True)
class Message:
    priority: Priority
    command: Command
