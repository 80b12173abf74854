"""Controller level settings: UART, channel id, clock source, power limits, reset."""

from __future__ import annotations

from dataclasses import dataclass

from ..common.types import (
    BaudRate,
    Channel,
    ClockSource,
    Dbm,
    Interface,
    Offset,
    TriggerDelay,
    parse_int,
)
from .base import Command, Response
from .basic import PowerDbm
from .registry import columns, register

_ISC_2425_25 = ("ISC-2425-25+",)


@dataclass(frozen=True)
class ChannelID(Response):
    channel_id: Channel


@dataclass(frozen=True)
class ClockSourceReading(Response):
    source: ClockSource


@dataclass(frozen=True)
class PowerOffset(Response):
    offset: int


# The port has to be reopened at the new rate; no reply can be read at the old one.
@register("$UARTS", no_reply=True)
@dataclass(frozen=True)
class SetUartBaudRate(Command):
    """Change the controller UART baud rate."""
    baud_rate: BaudRate = BaudRate(115200)


@register("$CHANG", fields=2, reply=columns(ChannelID, Channel.from_wire, start=1))
@dataclass(frozen=True)
class GetChannelID(Command):
    """Channel id of the controller answering on this link."""

    addressed = False


@register("$CHANS")
@dataclass(frozen=True)
class SetChannelID(Command):
    """Assign a new channel id."""
    new_channel: Channel = Channel(1)


@register("$CSG", fields=3, reply=columns(ClockSourceReading, ClockSource.from_wire))
@dataclass(frozen=True)
class GetClockSource(Command):
    """Clock source configuration."""


@register("$CSS")
@dataclass(frozen=True)
class SetClockSource(Command):
    """Select standalone, master, slave or inline slave clocking."""
    source: ClockSource = ClockSource.STANDALONE


@register("$COMS")
@dataclass(frozen=True)
class SetCommunicationInterface(Command):
    """Select UART or USB for communication."""
    interface: Interface = Interface.USB


@register("$PWRMDG", fields=3, reply=columns(PowerDbm, Dbm.from_wire), unsupported_on=_ISC_2425_25)
@dataclass(frozen=True)
class GetPowerMaxDbm(Command):
    """Maximum output power in dBm."""


@register("$PWRMDS")
@dataclass(frozen=True)
class SetPowerMaxDbm(Command):
    """Set the maximum output power in dBm."""
    max: Dbm = Dbm(47.1)


@register("$PWRMINDG", fields=3, reply=columns(PowerDbm, Dbm.from_wire), unsupported_on=_ISC_2425_25)
@dataclass(frozen=True)
class GetPowerMinDbm(Command):
    """Minimum output power in dBm."""


@register("$PWRMINDS", unsupported_on=_ISC_2425_25)
@dataclass(frozen=True)
class SetPowerMinDbm(Command):
    """Set the minimum output power in dBm."""
    min: Dbm = Dbm(-30.0)


@register("$PODG", fields=3, reply=columns(PowerOffset, parse_int), unsupported_on=_ISC_2425_25)
@dataclass(frozen=True)
class GetPowerOffset(Command):
    """Output power offset."""


@register("$PODS", unsupported_on=_ISC_2425_25)
@dataclass(frozen=True)
class SetPowerOffset(Command):
    """Set the output power offset."""
    offset: Offset = Offset(0)


@register("$RST")
@dataclass(frozen=True)
class ResetSystem(Command):
    """Reset the controller."""


@register("$ZHLDS", unsupported_on=_ISC_2425_25)
@dataclass(frozen=True)
class SetZHLTriggerDelay(Command):
    """Set the ZHL amplifier trigger delay."""
    delay: TriggerDelay = TriggerDelay(0)
