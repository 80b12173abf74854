"""Frequency, phase, RF output, power setpoints and PA readings."""

from __future__ import annotations

from dataclasses import dataclass

from ..common.types import Adc, Amperes, Dbm, Frequency, Phase, Temperature, Volts, Watt, parse_flag
from .base import Command, Response
from .registry import columns, register


@dataclass(frozen=True)
class PAPowerADC(Response):
    forward: Adc
    reflected: Adc


@dataclass(frozen=True)
class PACurrent(Response):
    current: Amperes


@dataclass(frozen=True)
class PAPowerDbm(Response):
    forward: Dbm
    reflected: Dbm

    def describe(self) -> str:
        return f"forward {self.forward} dBm, reflected {self.reflected} dBm"


@dataclass(frozen=True)
class PAPowerWatt(Response):
    forward: Watt
    reflected: Watt

    def describe(self) -> str:
        return f"forward {self.forward} W, reflected {self.reflected} W"


@dataclass(frozen=True)
class FrequencyReading(Response):
    frequency: Frequency

    def describe(self) -> str:
        return f"frequency {self.frequency} MHz"


@dataclass(frozen=True)
class RFOutputState(Response):
    enabled: bool

    def describe(self) -> str:
        return f"RF output {'enabled' if self.enabled else 'disabled'}"


@dataclass(frozen=True)
class PhaseReading(Response):
    phase: Phase


@dataclass(frozen=True)
class PowerDbm(Response):
    power: Dbm

    def describe(self) -> str:
        return f"{self.command.kind}: {self.power} dBm"


@dataclass(frozen=True)
class PowerWatt(Response):
    power: Watt

    def describe(self) -> str:
        return f"{self.command.kind}: {self.power} W"


@dataclass(frozen=True)
class TemperatureReading(Response):
    temperature: Temperature

    def describe(self) -> str:
        return f"{self.command.kind}: {self.temperature} °C"


@dataclass(frozen=True)
class PAVoltage(Response):
    voltage: Volts


@register("$PAG", fields=4, reply=columns(PAPowerADC, Adc.from_wire, Adc.from_wire))
@dataclass(frozen=True)
class GetPAPowerADC(Command):
    """Forward and reflected power as raw ADC counts."""


@register("$PIG", fields=3, reply=columns(PACurrent, Amperes.from_wire))
@dataclass(frozen=True)
class GetPACurrent(Command):
    """PA drain current."""


@register("$PPDG", fields=4, reply=columns(PAPowerDbm, Dbm.from_wire, Dbm.from_wire))
@dataclass(frozen=True)
class GetPAPowerDBM(Command):
    """Forward and reflected power in dBm."""


@register("$PPG", fields=4, reply=columns(PAPowerWatt, Watt.from_wire, Watt.from_wire))
@dataclass(frozen=True)
class GetPAPowerWatt(Command):
    """Forward and reflected power in watts."""


@register("$FCG", fields=3, reply=columns(FrequencyReading, Frequency.from_wire))
@dataclass(frozen=True)
class GetFrequency(Command):
    """Current CW frequency."""


@register("$FCS")
@dataclass(frozen=True)
class SetFrequency(Command):
    """Set the CW frequency (MHz)."""
    frequency: Frequency = Frequency(2450)


@register("$ECG", fields=3, reply=columns(RFOutputState, parse_flag))
@dataclass(frozen=True)
class GetRFOutput(Command):
    """Whether RF output is enabled."""


@register("$ECS")
@dataclass(frozen=True)
class SetRFOutput(Command):
    """Enable or disable RF output."""
    enabled: bool = False


@register("$PCG", fields=3, reply=columns(PhaseReading, Phase.from_wire))
@dataclass(frozen=True)
class GetPhase(Command):
    """Output phase in degrees."""


@register("$PCS")
@dataclass(frozen=True)
class SetPhase(Command):
    """Set output phase in degrees."""
    phase: Phase = Phase(0)


@register("$PWRDG", fields=3, reply=columns(PowerDbm, Dbm.from_wire))
@dataclass(frozen=True)
class GetPAPowerSetpointDBM(Command):
    """Power setpoint in dBm."""


@register("$PWRG", fields=3, reply=columns(PowerWatt, Watt.from_wire))
@dataclass(frozen=True)
class GetPAPowerSetpointWatt(Command):
    """Power setpoint in watts."""


@register("$PWRDS")
@dataclass(frozen=True)
class SetPAPowerSetpointDBM(Command):
    """Set the power setpoint in dBm."""
    power: Dbm = Dbm(50.0)


@register("$PWRS")
@dataclass(frozen=True)
class SetPAPowerSetpointWatt(Command):
    """Set the power setpoint in watts."""
    power: Watt = Watt(250.0)


@register("$PTG", fields=3, reply=columns(TemperatureReading, Temperature.from_wire))
@dataclass(frozen=True)
class GetPATemp(Command):
    """PA temperature."""


@register("$PVG", fields=3, reply=columns(PAVoltage, Volts.from_wire), unsupported_on=("ISC-2425-25+",))
@dataclass(frozen=True)
class GetPAVoltage(Command):
    """PA supply voltage."""
