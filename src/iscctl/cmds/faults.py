from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from ..common.errors import ReplyFormatError
from ..common.status import StatusCode, decode_status
from ..common.types import parse_int
from .base import Command, Response
from .registry import columns, register


@dataclass(frozen=True)
class PAErrors(Response):
    code: int


@dataclass(frozen=True)
class Status(Response):
    """Decoded $ST bit mask. An empty ``flags`` means no errors or warnings."""

    code: int
    flags: Tuple[StatusCode, ...]

    @property
    def healthy(self) -> bool:
        return not self.flags

    def describe(self) -> str:
        if not self.flags:
            return "No errors or warning"
        return "\n".join(str(f) for f in self.flags)


def _status_reply(command: Command, parts: List[str]) -> Status:
    text = parts[3].strip()
    try:
        code = int(text, 16)
    except ValueError as e:
        raise ReplyFormatError(f"status is not hexadecimal: {text!r}") from e
    return Status(command, code, tuple(decode_status(code)))


@register("$ERRC")
@dataclass(frozen=True)
class ClearErrors(Command):
    """Clear latched errors."""


@register("$PSG", fields=3, reply=columns(PAErrors, parse_int), unsupported_on=("ISC-2425-25+",))
@dataclass(frozen=True)
class GetPAErrors(Command):
    """PA error register."""


@register("$ST", fields=4, reply=_status_reply)
@dataclass(frozen=True)
class GetStatus(Command):
    """Controller status flags."""
