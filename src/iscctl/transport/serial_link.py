from __future__ import annotations

import logging
import time
from typing import List, Optional

import serial
import serial.tools.list_ports

from ..common.errors import TransactionError, TransportErrorKind

logger = logging.getLogger(__name__)

EOL = b"\r\n"
TERMINATORS = (b"\n", b"\r")

DEFAULT_BAUD = 115200
DEFAULT_READ_TIMEOUT_S = 0.05
DEFAULT_TRANSACTION_TIMEOUT_S = 1.0

__all__ = [
    "find_usb_device",
    "wait_for_device",
    "list_devices",
    "open_serial",
    "flush_serial",
    "transact",
    "DEFAULT_BAUD",
    "DEFAULT_READ_TIMEOUT_S",
    "DEFAULT_TRANSACTION_TIMEOUT_S",
]


# === Device discovery ===

def find_usb_device(target_vid: int, target_pid: int) -> Optional[str]:
    for port in serial.tools.list_ports.comports():
        if port.vid is None or port.pid is None:
            continue
        if port.vid == target_vid and port.pid == target_pid:
            return port.device
    return None


def wait_for_device(vid: int, pid: int, timeout_s: float = 60.0, poll_s: float = 0.2) -> str:
    t0 = time.monotonic()
    while time.monotonic() - t0 <= timeout_s:
        path = find_usb_device(vid, pid)
        if path:
            return path
        time.sleep(poll_s)
    raise TimeoutError(f"USB device {vid:04x}:{pid:04x} not found within {timeout_s}s")


def list_devices() -> List[dict]:
    """Every serial port the OS reports, with its USB identity when known."""
    out = []
    for port in sorted(serial.tools.list_ports.comports(), key=lambda p: p.device):
        out.append(
            {
                "device": port.device,
                "description": port.description,
                "vid": port.vid,
                "pid": port.pid,
                "serial_number": port.serial_number,
            }
        )
    return out


# === Serial port management ===

def open_serial(port: str, baudrate: int = DEFAULT_BAUD, timeout_s: float = DEFAULT_READ_TIMEOUT_S) -> serial.Serial:
    ser = serial.Serial(
        port,
        baudrate=baudrate,
        timeout=timeout_s,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        xonxoff=False,
        rtscts=False,
        dsrdtr=False,
        exclusive=True,
    )
    flush_serial(ser)
    logger.info("Opened %s at %d baud", port, baudrate)
    return ser


def flush_serial(ser: serial.Serial) -> None:
    """Flush input/output buffers safely."""
    try:
        ser.reset_input_buffer()
        ser.reset_output_buffer()
    except (serial.SerialException, OSError) as e:
        logger.debug("flush failed: %s", e)


# === Transaction executor ===

def transact(
    ser: serial.Serial,
    line: str,
    timeout_s: float = DEFAULT_TRANSACTION_TIMEOUT_S,
    *,
    expect_reply: bool = True,
) -> str:
    """Write one request line and read back one reply line.

    The line terminator is appended here. Reading stops at the first CR or
    LF; the reply is returned stripped. With ``expect_reply=False`` only the
    write happens and an empty string is returned.

    Raises TransactionError (kind write, read or timeout). Nothing is retried.
    """
    data = line.encode("ascii") + EOL
    logger.debug("TX %r", line)
    try:
        ser.reset_input_buffer()
        ser.write(data)
        ser.flush()
    except (serial.SerialException, OSError, ValueError) as e:
        raise TransactionError(TransportErrorKind.WRITE, f"failed to write {line!r}: {e}") from e

    if not expect_reply:
        return ""

    buf = bytearray()
    deadline = time.monotonic() + timeout_s
    while not any(t in buf for t in TERMINATORS):
        if time.monotonic() >= deadline:
            raise TransactionError(
                TransportErrorKind.TIMEOUT,
                f"no reply to {line!r} within {timeout_s}s (got {bytes(buf)!r})",
            )
        try:
            chunk = ser.read(ser.in_waiting or 1)
        except (serial.SerialException, OSError, ValueError) as e:
            raise TransactionError(TransportErrorKind.READ, f"failed to read reply to {line!r}: {e}") from e
        if chunk:
            buf.extend(chunk)

    reply = buf.decode("ascii", errors="replace").strip()
    logger.debug("RX %r", reply)
    return reply
