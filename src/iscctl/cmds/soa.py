"""Safe operating area (SOA) protection limits."""

from __future__ import annotations

from dataclasses import dataclass

from ..common.types import Amperes, Dbm, SOAType, Temperature, Volts, Watt, parse_flag
from .base import Command, Response
from .registry import columns, register


@dataclass(frozen=True)
class SOAConfig(Response):
    temperature: bool
    reflection: bool
    external_watchdog: bool
    dissipation: bool
    pa_status: bool
    iq_modulator: bool
    current: bool

    def describe(self) -> str:
        on = [k for k, v in self.values().items() if v]
        return "SOA enabled for: " + (", ".join(on) if on else "nothing")


@dataclass(frozen=True)
class SOACurrentLimits(Response):
    high_current: Amperes
    shutdown_current: Amperes


@dataclass(frozen=True)
class SOADissipationLimits(Response):
    high_dissipation: Watt
    shutdown_dissipation: Watt


@dataclass(frozen=True)
class SOAForwardPowerLimits(Response):
    high_forward_power: Watt
    shutdown_forward_power: Watt


@dataclass(frozen=True)
class SOAReflectionLimits(Response):
    high_reflection: Dbm
    shutdown_reflection: Dbm


@dataclass(frozen=True)
class SOATemperatureLimits(Response):
    high_temp: Temperature
    shutdown_temp: Temperature


@dataclass(frozen=True)
class SOAVoltageLimits(Response):
    shutdown_min_voltage: Volts
    low_voltage: Volts
    high_voltage: Volts
    shutdown_max_voltage: Volts


# field 3 of the $SOG reply is reserved
@register(
    "$SOG",
    fields=10,
    reply=columns(SOAConfig, parse_flag, None, parse_flag, parse_flag, parse_flag, parse_flag, parse_flag, parse_flag),
)
@dataclass(frozen=True)
class GetSOAConfig(Command):
    """Which SOA protections are enabled."""


@register("$SOA")
@dataclass(frozen=True)
class SetSOAConfig(Command):
    """Enable or disable one SOA protection."""
    soa_type: SOAType = SOAType.TEMPERATURE
    enabled: bool = True


@register("$SCG", fields=4, reply=columns(SOACurrentLimits, Amperes.from_wire, Amperes.from_wire), unsupported_on=("ISC-2425-25+",))
@dataclass(frozen=True)
class GetSOACurrentConfig(Command):
    """SOA current limits."""


@register("$SCS", unsupported_on=("ISC-2425-25+",))
@dataclass(frozen=True)
class SetSOACurrentConfig(Command):
    """Set SOA current limits."""
    high_current: Amperes = Amperes(5.5)
    shutdown_current: Amperes = Amperes(6.0)


@register("$SDG", fields=4, reply=columns(SOADissipationLimits, Watt.from_wire, Watt.from_wire))
@dataclass(frozen=True)
class GetSOADissipationConfig(Command):
    """SOA dissipation limits."""


@register("$SDS")
@dataclass(frozen=True)
class SetSOADissipationConfig(Command):
    """Set SOA dissipation limits."""
    high_dissipation: Watt = Watt(0.0)
    shutdown_dissipation: Watt = Watt(0.0)


@register("$SFG", fields=4, reply=columns(SOAForwardPowerLimits, Watt.from_wire, Watt.from_wire))
@dataclass(frozen=True)
class GetSOAForwardPowerLimits(Command):
    """SOA forward power limits."""


@register("$SFS")
@dataclass(frozen=True)
class SetSOAForwardPowerLimits(Command):
    """Set SOA forward power limits."""
    high_forward_power: Watt = Watt(55.0)
    shutdown_forward_power: Watt = Watt(65.0)


@register("$SOAGS")
@dataclass(frozen=True)
class SetSOAGraceTimer(Command):
    """Set the SOA grace timer thresholds."""
    high_forward_power: Watt = Watt(55.0)
    shutdown_forward_power: Watt = Watt(65.0)


@register("$SPG", fields=4, reply=columns(SOAReflectionLimits, Dbm.from_wire, Dbm.from_wire))
@dataclass(frozen=True)
class GetSOAPowerConfig(Command):
    """SOA reflected power limits."""


@register("$SPS")
@dataclass(frozen=True)
class SetSOAPowerConfig(Command):
    """Set SOA reflected power limits."""
    high_reflection: Dbm = Dbm(47.25)
    shutdown_reflection: Dbm = Dbm(54.0)


@register("$STG", fields=4, reply=columns(SOATemperatureLimits, Temperature.from_wire, Temperature.from_wire))
@dataclass(frozen=True)
class GetSOATempConfig(Command):
    """SOA temperature limits."""


@register("$STS")
@dataclass(frozen=True)
class SetSOATempConfig(Command):
    """Set SOA temperature limits."""
    high_temp: Temperature = Temperature(55)
    shutdown_temp: Temperature = Temperature(65)


@register(
    "$SVG",
    fields=6,
    reply=columns(SOAVoltageLimits, Volts.from_wire, Volts.from_wire, Volts.from_wire, Volts.from_wire),
)
@dataclass(frozen=True)
class GetSOAVoltageConfig(Command):
    """SOA supply voltage limits."""


@register("$SVS")
@dataclass(frozen=True)
class SetSOAVoltageConfig(Command):
    """Set SOA supply voltage limits."""
    shutdown_min_voltage: Volts = Volts(24.0)
    low_voltage: Volts = Volts(26.0)
    high_voltage: Volts = Volts(30.0)
    shutdown_max_voltage: Volts = Volts(32.0)


@register("$SWES")
@dataclass(frozen=True)
class SetSOAWatchdogConfig(Command):
    """Enable or disable the external watchdog."""
    enabled: bool = False
