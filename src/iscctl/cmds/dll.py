"""Digital locked loop configuration and frequency sweeps."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..common.types import Dbm, Frequency, MainDelay, Threshold, Watt, parse_flag
from .base import Command, Response
from .registry import columns, register


@dataclass(frozen=True)
class DLLConfig(Response):
    lower_frequency: Frequency
    upper_frequency: Frequency
    start_frequency: Frequency
    step_frequency: Frequency
    threshold: Threshold
    main_delay: MainDelay

    def describe(self) -> str:
        return (
            f"DLL {self.lower_frequency}-{self.upper_frequency} MHz, start {self.start_frequency} MHz, "
            f"step {self.step_frequency} MHz, threshold {self.threshold}, main delay {self.main_delay}"
        )


@dataclass(frozen=True)
class DLLState(Response):
    enabled: bool


@dataclass(frozen=True)
class SweepPointDbm(Response):
    frequency: Frequency
    forward: Dbm
    reflected: Dbm


@dataclass(frozen=True)
class SweepPointWatt(Response):
    frequency: Frequency
    forward: Watt
    reflected: Watt


@register(
    "$DLCG",
    fields=8,
    reply=columns(
        DLLConfig,
        Frequency.from_wire,
        Frequency.from_wire,
        Frequency.from_wire,
        Frequency.from_wire,
        Threshold.from_wire,
        MainDelay.from_wire,
    ),
)
@dataclass(frozen=True)
class GetDLLConfig(Command):
    """DLL search window, step, threshold and delay."""


@register("$DLCS")
@dataclass(frozen=True)
class SetDLLConfig(Command):
    """Configure the DLL search window, step, threshold and delay."""
    lower_frequency: Frequency = Frequency(2400)
    upper_frequency: Frequency = Frequency(2500)
    start_frequency: Frequency = Frequency(2410)
    step_frequency: Frequency = Frequency(5)
    threshold: Threshold = Threshold(0.5)
    main_delay: MainDelay = MainDelay(25)


@register("$DLEG", fields=3, reply=columns(DLLState, parse_flag))
@dataclass(frozen=True)
class GetDLLEnabled(Command):
    """Whether the DLL is enabled."""


@register("$DLES")
@dataclass(frozen=True)
class SetDLLEnabled(Command):
    """Enable or disable the DLL."""
    enabled: bool = False


# Sweeps run on the device before the reply arrives; the trailing 1 asks for a reply.
@register(
    "$SWPD",
    fields=5,
    reply=columns(SweepPointDbm, Frequency.from_wire, Dbm.from_wire, Dbm.from_wire),
    long_running=True,
)
@dataclass(frozen=True)
class PerformSweepDBM(Command):
    """Sweep a frequency range at a dBm power level."""
    start_frequency: Frequency = Frequency(2400)
    stop_frequency: Frequency = Frequency(2500)
    step_frequency: Frequency = Frequency(10)
    power: Dbm = Dbm(10.0)

    def wire_args(self) -> List[str]:
        return super().wire_args() + ["1"]


@register(
    "$SWP",
    fields=5,
    reply=columns(SweepPointWatt, Frequency.from_wire, Watt.from_wire, Watt.from_wire),
    long_running=True,
)
@dataclass(frozen=True)
class PerformSweepWatt(Command):
    """Sweep a frequency range at a power level in watts."""
    start_frequency: Frequency = Frequency(2400)
    stop_frequency: Frequency = Frequency(2500)
    step_frequency: Frequency = Frequency(10)
    power: Watt = Watt(100.0)

    def wire_args(self) -> List[str]:
        return super().wire_args() + ["1"]
