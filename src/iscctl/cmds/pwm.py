from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..common.types import Duration, Frequency, Percentage
from .base import Command, Response
from .registry import register


@dataclass(frozen=True)
class PWMSettings(Response):
    frequency: Frequency
    duty_cycle: Percentage

    def describe(self) -> str:
        return f"PWM {self.frequency} Hz, duty cycle {self.duty_cycle}%"


# the $DCG reply carries 11 fields; only the PWM frequency and duty cycle are used
def _pwm_reply(command: Command, parts: List[str]) -> PWMSettings:
    return PWMSettings(command, Frequency.from_wire(parts[2]), Percentage.from_wire(parts[10]))


@register("$DCG", fields=11, reply=_pwm_reply)
@dataclass(frozen=True)
class GetPWMDutyCycle(Command):
    """PWM frequency and duty cycle."""


@register("$DCS")
@dataclass(frozen=True)
class SetPWMDutyCycle(Command):
    """Set the PWM duty cycle in percent; 100 is continuous wave."""
    duty_cycle: Percentage = Percentage(100)


@register("$DCFS")
@dataclass(frozen=True)
class SetPWMFrequency(Command):
    """Set the PWM frequency."""
    frequency: Frequency = Frequency(1200)

    def wire_args(self) -> List[str]:
        return super().wire_args() + ["0"]


@register("$ECST")
@dataclass(frozen=True)
class SetTimedRFEnable(Command):
    """Enable RF output for a fixed duration."""
    duration: Duration = Duration(0)

    def wire_args(self) -> List[str]:
        return ["1"] + super().wire_args()
