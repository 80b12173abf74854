from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

ERR_MARKER = "ERR"

_CODE_RE = re.compile(r"ERR([0-9A-Fa-f]{2})")

__all__ = [
    "ERR_MARKER",
    "DeviceErrorKind",
    "DeviceError",
    "classify_device_error",
    "TransportErrorKind",
    "TransactionError",
    "ReplyFormatError",
    "UnsupportedCommandError",
    "UnknownCommandError",
    "SessionClosedError",
]


class DeviceErrorKind(Enum):
    """Causes the device reports through an ERR## token."""
    RESERVED = "Reserved"
    MAX_LENGTH_EXCEEDED = "Max length exceeded"
    TOO_FEW_ARGS = "Too few arguments"
    TOO_MANY_ARGS = "Too many arguments"
    WRONG_MODE = "Wrong mode"
    SYSTEM_BUSY = "System busy"
    NOT_IMPLEMENTED = "Satisfied but not implemented"
    ARG_NUMBER = "Argument number error"
    INVALID_ARG = "Invalid argument"
    FAILED_EXECUTION = "Execution failed"
    UNKNOWN = "Unknown error"


_KIND_BY_CODE = {
    "01": DeviceErrorKind.RESERVED,
    "02": DeviceErrorKind.MAX_LENGTH_EXCEEDED,
    "03": DeviceErrorKind.TOO_FEW_ARGS,
    "04": DeviceErrorKind.TOO_MANY_ARGS,
    "05": DeviceErrorKind.WRONG_MODE,
    "06": DeviceErrorKind.SYSTEM_BUSY,
    "07": DeviceErrorKind.NOT_IMPLEMENTED,
    "10": DeviceErrorKind.ARG_NUMBER,
    "7E": DeviceErrorKind.FAILED_EXECUTION,
}


@dataclass(frozen=True)
class DeviceError:
    kind: DeviceErrorKind
    code: Optional[str] = None
    # 1-based argument position for INVALID_ARG
    argument: Optional[int] = None

    def __str__(self) -> str:
        tag = f"ERR{self.code}" if self.code else ERR_MARKER
        if self.kind is DeviceErrorKind.INVALID_ARG:
            return f"{tag}: invalid argument {self.argument}"
        return f"{tag}: {self.kind.value}"


def classify_device_error(raw: str) -> DeviceError:
    """Map a reply containing the ERR marker onto a DeviceError.

    Codes 11..19 name the offending argument position. Anything that does
    not match the table is reported as UNKNOWN with the code kept for
    diagnosis.
    """
    m = _CODE_RE.search(raw)
    if not m:
        return DeviceError(DeviceErrorKind.UNKNOWN)
    code = m.group(1).upper()
    kind = _KIND_BY_CODE.get(code)
    if kind is not None:
        return DeviceError(kind, code)
    if code[0] == "1" and code[1] in "123456789":
        return DeviceError(DeviceErrorKind.INVALID_ARG, code, int(code[1]))
    return DeviceError(DeviceErrorKind.UNKNOWN, code)


class TransportErrorKind(Enum):
    WRITE = "write"
    READ = "read"
    TIMEOUT = "timeout"


class TransactionError(IOError):
    """Raised by the executor when a write/read cycle fails."""

    def __init__(self, kind: TransportErrorKind, description: str):
        super().__init__(description)
        self.kind = kind
        self.description = description


class ReplyFormatError(ValueError):
    """A reply field could not be parsed into its value type."""


class UnsupportedCommandError(ValueError):
    pass


class UnknownCommandError(KeyError):
    pass


class SessionClosedError(RuntimeError):
    pass
