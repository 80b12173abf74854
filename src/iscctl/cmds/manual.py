"""Manual (open loop) gain control: attenuation, auto gain, IQ magnitude and ISC output power."""

from __future__ import annotations

from dataclasses import dataclass

from ..common.types import Attenuation, Dbm, Percentage, parse_flag
from .base import Command, Response
from .basic import PowerDbm
from .registry import columns, register


@dataclass(frozen=True)
class AttenuationReading(Response):
    attenuation: Attenuation

    def describe(self) -> str:
        return f"attenuation {self.attenuation} dB"


@dataclass(frozen=True)
class AutoGainState(Response):
    enabled: bool


@dataclass(frozen=True)
class Magnitude(Response):
    magnitude: Percentage

    def describe(self) -> str:
        return f"IQ magnitude {self.magnitude}%"


@register("$GCG", fields=3, reply=columns(AttenuationReading, Attenuation.from_wire))
@dataclass(frozen=True)
class GetAttenuation(Command):
    """DSA attenuation in dB."""


@register("$GCS")
@dataclass(frozen=True)
class SetAttenuation(Command):
    """Set DSA attenuation (0-31.5 dB, 0.25 dB steps)."""
    attenuation: Attenuation = Attenuation(7.0)


@register("$AGEG", fields=3, reply=columns(AutoGainState, parse_flag))
@dataclass(frozen=True)
class GetAutoGainState(Command):
    """Whether the auto gain algorithm is enabled."""


@register("$AGES")
@dataclass(frozen=True)
class SetAutoGainState(Command):
    """Enable or disable auto gain."""
    enabled: bool = True


@register("$MCG", fields=3, reply=columns(Magnitude, Percentage.from_wire))
@dataclass(frozen=True)
class GetMagnitude(Command):
    """IQ modulator magnitude in percent."""


@register("$MCS")
@dataclass(frozen=True)
class SetMagnitude(Command):
    """Set IQ modulator magnitude in percent."""
    magnitude: Percentage = Percentage(75)


@register("$PWRSGDG", fields=3, reply=columns(PowerDbm, Dbm.from_wire))
@dataclass(frozen=True)
class GetISCPowerOutput(Command):
    """Small signal output power of the ISC in dBm."""


@register("$PWRSGDS")
@dataclass(frozen=True)
class SetISCPowerOutput(Command):
    """Set the small signal output power of the ISC in dBm."""
    power: Dbm = Dbm(20.0)
