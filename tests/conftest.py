from __future__ import annotations

import time

import pytest
from serial import SerialException

from iscctl.common import config as config_mod


class FakeSerial:
    """Stands in for serial.Serial: answers each written line from a token -> reply map.

    A reply may be a string, a callable taking the request line, or None
    (stay silent). Unknown tokens are answered with ``default``.
    """

    def __init__(self, replies=None, *, default=None, fail_write=False, fail_read=False, chunk=None):
        self.replies = dict(replies or {})
        self.default = default
        self.fail_write = fail_write
        self.fail_read = fail_read
        self.chunk = chunk
        self.written = []
        self.is_open = True
        self._rx = bytearray()

    @property
    def lines(self):
        return [w.decode("ascii").rstrip("\r\n") for w in self.written]

    @property
    def in_waiting(self):
        return len(self._rx) if self.chunk is None else min(self.chunk, len(self._rx))

    def reset_input_buffer(self):
        self._rx.clear()

    def reset_output_buffer(self):
        pass

    def write(self, data):
        if self.fail_write:
            raise SerialException("device disconnected")
        self.written.append(bytes(data))
        line = data.decode("ascii").rstrip("\r\n")
        reply = self.replies.get(line.split(",")[0], self.default)
        if callable(reply):
            reply = reply(line)
        if reply is not None:
            self._rx.extend(reply.encode("ascii") + b"\r\n")
        return len(data)

    def flush(self):
        pass

    def read(self, size=1):
        if self.fail_read:
            raise SerialException("read failed")
        out = bytes(self._rx[:size])
        del self._rx[:size]
        if not out:
            time.sleep(0.001)
        return out

    def close(self):
        self.is_open = False


@pytest.fixture
def fake_serial():
    return FakeSerial


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    monkeypatch.setattr(config_mod, "CONFIG_FILE", path)
    return path
