"""Translate Commands to request lines and reply lines to Responses.

Both directions go through the registry; nothing here knows individual
commands. ``decode`` never raises: every malformed reply comes back as a
DecodeFailure and every ERR reply as a DeviceFailure.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..common.errors import ERR_MARKER, ReplyFormatError, classify_device_error
from ..common.types import Channel
from . import basic, dll, faults, information, manual, pwm, soa, system  # noqa: F401  (registers commands)
from .base import Acknowledgement, Command, DecodeFailure, DeviceFailure, Response
from .registry import lookup

logger = logging.getLogger(__name__)

__all__ = ["EOL", "encode", "decode"]

EOL = "\r\n"
OK_MARKER = "OK"


def encode(command: Command, default_channel: Optional[Channel] = None) -> str:
    """Request line for *command*, without the line terminator."""
    spec = lookup(command)
    parts = [spec.token]
    if command.addressed:
        channel = command.channel or default_channel or Channel()
        parts.append(channel.to_wire())
    parts.extend(command.wire_args())
    return ",".join(parts)


def decode(raw: str, command: Command) -> Response:
    spec = lookup(command)
    text = (raw or "").strip()

    # some replies echo the request token ($ERRC itself contains the marker)
    body = text.replace(spec.token, "")
    if ERR_MARKER in body:
        return DeviceFailure(command, classify_device_error(body), text)

    if not spec.fields:
        if spec.no_reply:
            return Acknowledgement(command, text)
        if not text:
            return DecodeFailure(command, text, "empty reply")
        return Acknowledgement(command, text)

    parts = text.split(",")
    if not text or len(parts) not in spec.fields:
        expected = " or ".join(str(n) for n in spec.fields)
        return DecodeFailure(command, text, f"expected {expected} fields, got {len(parts) if text else 0}")
    if parts[0].strip() != OK_MARKER:
        return DecodeFailure(command, text, f"expected {OK_MARKER} in the first field, got {parts[0]!r}")

    try:
        return spec.reply(command, parts)
    except (ReplyFormatError, ValueError, IndexError, ArithmeticError) as e:
        logger.debug("%s reply %r rejected: %s", spec.token, text, e)
        return DecodeFailure(command, text, str(e))
