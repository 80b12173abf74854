from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

# Config location: ~/.iscctl/config.toml  (override with ISCCTL_CONFIG_FILE if needed)
CONFIG_FILE = Path(os.environ.get("ISCCTL_CONFIG_FILE", Path.home() / ".iscctl" / "config.toml"))

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib

import tomli_w

logger = logging.getLogger(__name__)

__all__ = [
    "CONFIG_FILE",
    "SessionConfig",
    "load_config",
    "save_config",
    "get_default_port",
    "set_default_port",
    "clear_default_port",
]

FTDI_VID = 0x0403
FTDI_PID = 0x6001


@dataclass(frozen=True)
class SessionConfig:
    """Everything a Session needs; passed in explicitly, never read from globals."""

    port: Optional[str] = None
    baud: int = 115200
    vendor_id: int = FTDI_VID
    product_id: int = FTDI_PID
    read_timeout_s: float = 0.05
    channel: int = 1
    timeout_s: float = 1.0
    long_timeout_s: float = 30.0
    tick_interval_s: float = 1.0
    broadcast_capacity: int = 100
    lock_timeout_s: float = 5.0
    hardware: Optional[str] = None
    unsupported_policy: str = "warn"

    def __post_init__(self) -> None:
        if self.unsupported_policy not in ("warn", "reject"):
            raise ValueError(f"unsupported_policy must be 'warn' or 'reject', not {self.unsupported_policy!r}")
        if self.broadcast_capacity < 1:
            raise ValueError("broadcast_capacity must be at least 1")

    @classmethod
    def from_mapping(cls, cfg: Dict[str, Any]) -> "SessionConfig":
        """Build from a parsed config file ([serial] and [session] tables)."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for section in ("serial", "session"):
            for key, val in cfg.get(section, {}).items():
                if key in known:
                    values[key] = val
                else:
                    logger.warning("Ignoring unknown config key %s.%s", section, key)
        return cls(**values)

    @classmethod
    def from_file(cls, **overrides: Any) -> "SessionConfig":
        """Defaults, then the config file, then non-None *overrides*."""
        cfg = cls.from_mapping(load_config())
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(cfg, **overrides) if overrides else cfg


def _ensure_parent() -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)


def load_config() -> Dict[str, Any]:
    if CONFIG_FILE.exists():
        with CONFIG_FILE.open("rb") as f:
            return tomllib.load(f)
    return {}


def save_config(cfg: Dict[str, Any]) -> None:
    _ensure_parent()
    with CONFIG_FILE.open("wb") as f:
        tomli_w.dump(cfg, f)


def get_default_port() -> Optional[str]:
    cfg = load_config()
    return cfg.get("serial", {}).get("port")


def set_default_port(port: str) -> None:
    cfg = load_config()
    cfg.setdefault("serial", {})["port"] = port
    save_config(cfg)


def clear_default_port() -> None:
    cfg = load_config()
    if "serial" in cfg and "port" in cfg["serial"]:
        del cfg["serial"]["port"]
        if not cfg["serial"]:
            del cfg["serial"]
        save_config(cfg)
