from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type, Union

from ..common.errors import UnknownCommandError
from .base import Command, Response

ReplyParser = Callable[[Command, List[str]], Response]

__all__ = [
    "CommandSpec",
    "ReplyParser",
    "register",
    "columns",
    "lookup",
    "find",
    "all_specs",
    "cli_name",
]


@dataclass(frozen=True)
class CommandSpec:
    """Registry entry: how one command kind goes over the wire."""

    kind: Type[Command]
    token: str
    family: str
    # accepted reply field counts; empty for acknowledgement-only commands
    fields: Tuple[int, ...] = ()
    reply: Optional[ReplyParser] = None
    no_reply: bool = False
    long_running: bool = False
    unsupported_on: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.kind.__name__

    @property
    def summary(self) -> str:
        doc = (self.kind.__doc__ or "").strip()
        return doc.splitlines()[0] if doc else ""

    def supported_on(self, hardware: Optional[str]) -> bool:
        if not hardware:
            return True
        return hardware.upper() not in (h.upper() for h in self.unsupported_on)


_Registry: Dict[Type[Command], CommandSpec] = {}
_ByToken: Dict[str, CommandSpec] = {}


def register(
    token: str,
    *,
    fields: Union[int, Sequence[int], None] = None,
    reply: Optional[ReplyParser] = None,
    no_reply: bool = False,
    long_running: bool = False,
    unsupported_on: Sequence[str] = (),
) -> Callable[[Type[Command]], Type[Command]]:
    counts: Tuple[int, ...]
    if fields is None:
        counts = ()
    elif isinstance(fields, int):
        counts = (fields,)
    else:
        counts = tuple(fields)
    if reply is not None and not counts:
        raise ValueError(f"{token}: a reply parser needs an expected field count")

    def _wrap(cls: Type[Command]) -> Type[Command]:
        if token in _ByToken and _ByToken[token].kind is not cls:
            raise ValueError(f"{token} already registered for {_ByToken[token].name}")
        spec = CommandSpec(
            kind=cls,
            token=token,
            family=cls.__module__.rsplit(".", 1)[-1],
            fields=counts,
            reply=reply,
            no_reply=no_reply,
            long_running=long_running,
            unsupported_on=tuple(unsupported_on),
        )
        _Registry[cls] = spec
        _ByToken[token] = spec
        return cls

    return _wrap


def columns(response_cls: Type[Response], *parsers: Optional[Callable[[str], object]], start: int = 2) -> ReplyParser:
    """Reply parser reading consecutive fields from *start*; a None parser skips that field."""

    def _parse(command: Command, parts: List[str]) -> Response:
        values = [p(parts[start + i]) for i, p in enumerate(parsers) if p is not None]
        return response_cls(command, *values)

    return _parse


def lookup(kind: Union[Command, Type[Command]]) -> CommandSpec:
    cls = kind if isinstance(kind, type) else type(kind)
    try:
        return _Registry[cls]
    except KeyError:
        raise UnknownCommandError(f"{cls.__name__} is not a registered command") from None


def _snake(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", name).lower()


def find(name: str) -> CommandSpec:
    """Look a command up by class name, kebab/snake name or wire token.

    ``SetFrequency``, ``set-frequency``, ``set_frequency``, ``$FCS`` and
    ``fcs`` all resolve to the same entry.
    """
    key = name.strip()
    token = key.upper() if key.startswith("$") else "$" + key.upper()
    if token in _ByToken:
        return _ByToken[token]
    wanted = key.replace("-", "_").lower()
    for spec in _Registry.values():
        if wanted in (spec.name.lower(), _snake(spec.name)):
            return spec
    raise UnknownCommandError(f"unknown command: {name}")


def all_specs() -> List[CommandSpec]:
    return sorted(_Registry.values(), key=lambda s: (s.family, s.name))


def cli_name(spec: CommandSpec) -> str:
    return _snake(spec.name).replace("_", "-")
