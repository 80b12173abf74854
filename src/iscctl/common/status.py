from __future__ import annotations

from enum import Enum
from typing import List

__all__ = ["StatusCode", "decode_status"]

_WARN = "Warning only - no action."
_OFF = "RF output disabled."
_THROTTLE = "With autogain enabled, unit throttles output power (see SOA for more detail)."
_CRITICAL = "RF output disabled in case of critical measurement."


class StatusCode(Enum):
    """Bits of the $ST status mask: (bit, label, device action)."""

    UNSPECIFIED_ERROR = (0x1, "Unspecified Error", "RF output OFF (blocking); Reset controller.")
    HIGH_PA_TEMPERATURE = (0x2, "High PA Temperature", _THROTTLE)
    SHUTDOWN_PA_TEMPERATURE = (0x4, "Shutdown PA Temperature", _OFF)
    HIGH_REFLECTED_POWER = (0x8, "High Reflected Power", _THROTTLE)
    SHUTDOWN_REFLECTED_POWER = (0x10, "Shutdown Reflected Power", _OFF)
    RESET_DETECTED = (0x20, "Reset Detected", _WARN)
    TEMPERATURE_READOUT_ERROR = (0x40, "Temperature Read-out Error", _OFF)
    POWER_MEASUREMENT_FAILURE = (0x80, "Power Measurement Failure", _OFF)
    RF_ENABLE_FAILURE = (0x100, "RF Enable Failure", _WARN)
    MULTIPLEXER_FAILURE = (0x200, "Multiplexer Failure", _OFF)
    EXTERNAL_SHUTDOWN_TRIGGERED = (0x400, "External Shutdown Triggered", "RF output disabled (Non-Blocking).")
    OUT_OF_MEMORY = (0x800, "Out of Memory", _WARN)
    I2C_COMMUNICATION_ERROR = (0x1000, "I2C Communication Error", _CRITICAL)
    SPI_COMMUNICATION_ERROR = (0x2000, "SPI Communication Error", _CRITICAL)
    SOA_MEASUREMENT_ERROR = (0x8000, "SOA Measurement Error", _OFF)
    EXTERNAL_WATCHDOG_TIMEOUT = (0x10000, "External Watchdog Timeout", _OFF)
    CALIBRATION_MISSING = (0x20000, "Calibration Missing", _OFF)
    EXTERNAL_PROTECTION_TRIGGERED = (0x40000, "External Protection Triggered", _WARN)
    SOA_HIGH_DISSIPATION = (0x80000, "SOA High Dissipation", _WARN)
    SOA_SHUTDOWN_DISSIPATION = (0x100000, "SOA Shutdown Dissipation", _OFF)
    CALIBRATION_EEPROM_OUTDATED = (0x200000, "Calibration EEPROM Outdated", _OFF)
    PA_ERROR = (0x400000, "PA Error", _OFF)
    PA_RESET_FAILURE = (0x800000, "PA Reset Failure", _OFF)
    PA_HIGH_CURRENT = (0x1000000, "PA High Current", _OFF)
    ALARM_IN = (0x4000000, "Alarm In", _OFF)
    SOA_HIGH_CURRENT = (0x10000000, "SOA High Current", _WARN)
    SOA_SHUTDOWN_CURRENT = (0x20000000, "SOA Shutdown Current", _OFF)
    SOA_HIGH_FORWARD_POWER = (0x40000000, "SOA High Forward Power", _WARN)
    SOA_SHUTDOWN_FORWARD_POWER = (0x80000000, "SOA Shutdown Forward Power", _OFF)
    SOA_SHUTDOWN_MINIMUM_VOLTAGE = (0x100000000, "SOA Shutdown Minimum Voltage", _OFF)
    SOA_LOW_VOLTAGE = (0x200000000, "SOA Low Voltage", _WARN)
    SOA_HIGH_VOLTAGE = (0x400000000, "SOA High Voltage", _WARN)
    SOA_SHUTDOWN_MAXIMUM_VOLTAGE = (0x800000000, "SOA Shutdown Maximum Voltage", _OFF)

    def __init__(self, bit: int, label: str, action: str):
        self.bit = bit
        self.label = label
        self.action = action

    def __str__(self) -> str:
        return f"{self.label}: {self.action}"


_KNOWN_MASK = 0
for _code in StatusCode:
    _KNOWN_MASK |= _code.bit


def decode_status(code: int) -> List[StatusCode]:
    """Flags set in *code*, lowest bit first. Undocumented bits report as UNSPECIFIED_ERROR."""
    flags = [c for c in StatusCode if code & c.bit]
    if code & ~_KNOWN_MASK and StatusCode.UNSPECIFIED_ERROR not in flags:
        flags.insert(0, StatusCode.UNSPECIFIED_ERROR)
    return flags
