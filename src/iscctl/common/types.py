from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, Optional

from .errors import ReplyFormatError

__all__ = [
    "WireValue",
    "Channel",
    "Frequency",
    "Temperature",
    "Phase",
    "Percentage",
    "MainDelay",
    "Seconds",
    "BaudRate",
    "Duration",
    "Offset",
    "TriggerDelay",
    "Watt",
    "Dbm",
    "Volts",
    "Amperes",
    "Threshold",
    "Adc",
    "Attenuation",
    "ClockSource",
    "Interface",
    "SOAType",
    "parse_int",
    "parse_float",
    "parse_flag",
    "parse_text",
    "to_wire",
    "coerce",
]

_U8 = 0xFF
_U16 = 0xFFFF
_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF


def _truncate_int(value: Any) -> int:
    # "24.0" -> 24, "-3.9" -> -3 (truncate, never round)
    if isinstance(value, str):
        head = value.strip().split(".", 1)[0]
        return int(head)
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"not a finite number: {value!r}")
    return int(value)


def parse_int(text: str) -> int:
    try:
        return _truncate_int(text)
    except (TypeError, ValueError) as e:
        raise ReplyFormatError(f"not an integer: {text!r}") from e


def parse_float(text: str) -> float:
    try:
        value = float(text.strip())
    except (TypeError, ValueError) as e:
        raise ReplyFormatError(f"not a number: {text!r}") from e
    if not math.isfinite(value):
        raise ReplyFormatError(f"not a finite number: {text!r}")
    return value


def parse_flag(text: str) -> bool:
    n = parse_int(text)
    if n not in (0, 1):
        raise ReplyFormatError(f"not a 0/1 flag: {text!r}")
    return bool(n)


def parse_text(text: str) -> str:
    return text.strip()


@dataclass(frozen=True, order=True)
class WireValue:
    """A protocol quantity, clamped into range when constructed."""

    value: float = 0

    MINIMUM: ClassVar[Optional[float]] = None
    MAXIMUM: ClassVar[Optional[float]] = None
    STEP: ClassVar[Optional[float]] = None
    INTEGRAL: ClassVar[bool] = False

    def __post_init__(self) -> None:
        v: Any = self.value
        if isinstance(v, WireValue):
            v = v.value
        v = _truncate_int(v) if self.INTEGRAL else float(v)
        if not math.isfinite(v):
            raise ValueError(f"{type(self).__name__} must be finite, got {v!r}")
        if self.STEP:
            v = round(v / self.STEP) * self.STEP
        if self.MINIMUM is not None and v < self.MINIMUM:
            v = type(v)(self.MINIMUM)
        if self.MAXIMUM is not None and v > self.MAXIMUM:
            v = type(v)(self.MAXIMUM)
        object.__setattr__(self, "value", v)

    @classmethod
    def from_wire(cls, text: str):
        return cls(parse_int(text) if cls.INTEGRAL else parse_float(text))

    def to_wire(self) -> str:
        if self.INTEGRAL:
            return str(self.value)
        return f"{self.value:.1f}"

    def __int__(self) -> int:
        return int(self.value)

    def __float__(self) -> float:
        return float(self.value)

    def __str__(self) -> str:
        return self.to_wire()


class _Integral(WireValue):
    INTEGRAL = True


@dataclass(frozen=True, order=True)
class Channel(_Integral):
    value: int = 1
    MINIMUM = 0
    MAXIMUM = _U8


@dataclass(frozen=True, order=True)
class Frequency(_Integral):
    """Frequency in MHz."""
    value: int = 2450
    MINIMUM = 0
    MAXIMUM = _U16


@dataclass(frozen=True, order=True)
class Temperature(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = _U8


@dataclass(frozen=True, order=True)
class Phase(_Integral):
    value: int = 0
    MINIMUM = -0x8000
    MAXIMUM = 0x7FFF


@dataclass(frozen=True, order=True)
class Percentage(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = 100


@dataclass(frozen=True, order=True)
class MainDelay(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = _U16


@dataclass(frozen=True, order=True)
class Seconds(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = _U64


@dataclass(frozen=True, order=True)
class BaudRate(_Integral):
    value: int = 115200
    MINIMUM = 0
    MAXIMUM = _U32


@dataclass(frozen=True, order=True)
class Duration(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = _U32


@dataclass(frozen=True, order=True)
class Offset(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = _U8


@dataclass(frozen=True, order=True)
class TriggerDelay(_Integral):
    value: int = 0
    MINIMUM = 0
    MAXIMUM = _U16


@dataclass(frozen=True, order=True)
class Watt(WireValue):
    value: float = 0.0


@dataclass(frozen=True, order=True)
class Dbm(WireValue):
    value: float = 0.0


@dataclass(frozen=True, order=True)
class Volts(WireValue):
    value: float = 0.0


@dataclass(frozen=True, order=True)
class Amperes(WireValue):
    value: float = 0.0


@dataclass(frozen=True, order=True)
class Threshold(WireValue):
    value: float = 0.0


@dataclass(frozen=True, order=True)
class Adc(WireValue):
    value: float = 0.0
    MINIMUM = 0.0
    MAXIMUM = 4095.0


@dataclass(frozen=True, order=True)
class Attenuation(WireValue):
    """Attenuation in dB, 0..31.5 in 0.25 dB steps."""
    value: float = 0.0
    MINIMUM = 0.0
    MAXIMUM = 31.5
    STEP = 0.25


class _WireEnum(IntEnum):
    @classmethod
    def from_wire(cls, text: str):
        n = parse_int(text)
        try:
            return cls(n)
        except ValueError as e:
            raise ReplyFormatError(f"unknown {cls.__name__} value: {n}") from e

    def to_wire(self) -> str:
        return str(int(self))


class ClockSource(_WireEnum):
    STANDALONE = 0
    MASTER = 1
    SLAVE = 2
    SLAVE_INLINE = 3

    @classmethod
    def from_wire(cls, text: str) -> "ClockSource":
        n = parse_int(text)
        try:
            return cls(n)
        except ValueError:
            return cls.STANDALONE


class Interface(_WireEnum):
    UART = 1
    USB = 2


class SOAType(_WireEnum):
    TEMPERATURE = 0
    REFLECTION = 2
    EXTERNAL_WATCHDOG = 3
    DISSIPATION = 4
    PA_STATUS = 5
    IQ_MODULATOR = 6
    CURRENT = 7
    VOLTAGE = 8
    FORWARD_POWER = 9


def to_wire(value: Any) -> str:
    """Render one request argument."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (WireValue, _WireEnum)):
        return value.to_wire()
    return str(value)


_TRUE = {"1", "true", "yes", "on", "enable", "enabled"}
_FALSE = {"0", "false", "no", "off", "disable", "disabled"}


def coerce(kind: Any, value: Any) -> Any:
    """Turn a plain number or command-line string into the field type *kind*."""
    if kind is None or isinstance(value, kind):
        return value
    if kind is bool:
        if isinstance(value, str):
            s = value.strip().lower()
            if s in _TRUE:
                return True
            if s in _FALSE:
                return False
            raise ValueError(f"not a boolean: {value!r}")
        return bool(value)
    if isinstance(kind, type) and issubclass(kind, IntEnum):
        if isinstance(value, str):
            s = value.strip()
            if s.lstrip("-").isdigit():
                return kind(int(s))
            try:
                return kind[s.upper().replace("-", "_")]
            except KeyError as e:
                choices = ", ".join(m.name.lower() for m in kind)
                raise ValueError(f"{value!r} is not one of: {choices}") from e
        return kind(value)
    if isinstance(kind, type) and issubclass(kind, WireValue):
        if isinstance(value, str):
            value = value.strip()
            if not kind.INTEGRAL:
                value = float(value)
        return kind(value)
    return kind(value)
