"""Session: the single owner of the serial link.

Producers call ``enqueue`` from any thread. A background thread wakes once
per tick, drains everything queued so far, orders the batch by priority
(stable, so equal priorities keep arrival order) and runs the transactions
one at a time under the link lock, publishing each Response. ``send`` is the
synchronous path for callers that need request/response sequencing; it takes
the same lock and must not be called from the dispatch thread.
"""

from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import List, Optional

from .broadcast import ResponseBroadcast, ResponseStream
from .cmds.base import Command, DecodeFailure, Message, Priority, Response, TransportFailure
from .cmds.codec import decode, encode
from .cmds.registry import lookup
from .common.config import SessionConfig, get_default_port
from .common.errors import SessionClosedError, TransactionError, UnsupportedCommandError
from .common.types import Channel
from .transport.serial_link import find_usb_device, open_serial, transact

logger = logging.getLogger(__name__)

__all__ = ["Session", "execute", "resolve_port"]


def execute(ser, command: Command, config: SessionConfig) -> Response:
    """encode -> transact -> decode for one command. Never raises for link or reply problems."""
    spec = lookup(command)
    line = encode(command, Channel(config.channel))
    timeout = config.long_timeout_s if spec.long_running else config.timeout_s
    try:
        raw = transact(ser, line, timeout, expect_reply=not spec.no_reply)
    except TransactionError as e:
        logger.warning("%s: %s", command.kind, e.description)
        return TransportFailure(command, e.kind, e.description)
    response = decode(raw, command)
    if not response.ok:
        logger.warning("%s", response.describe())
    return response


def resolve_port(config: SessionConfig) -> str:
    """Explicit port, then the saved default (if it still exists), then USB autodetect."""
    if config.port:
        return config.port
    saved = get_default_port()
    if saved and Path(saved).exists():
        return saved
    found = find_usb_device(config.vendor_id, config.product_id)
    if found:
        return found
    raise FileNotFoundError(
        f"No serial port given, no saved port and no USB device {config.vendor_id:04x}:{config.product_id:04x}"
    )


class Session:
    def __init__(self, transport, config: Optional[SessionConfig] = None):
        self.config = config or SessionConfig()
        self._transport = transport
        self._lock = threading.Lock()
        self._inbox: "queue.SimpleQueue[Message]" = queue.SimpleQueue()
        self._carry: List[Message] = []
        self._broadcast = ResponseBroadcast(self.config.broadcast_capacity)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._closed = False

    @classmethod
    def open(cls, config: Optional[SessionConfig] = None) -> "Session":
        config = config or SessionConfig()
        port = resolve_port(config)
        ser = open_serial(port, baudrate=config.baud, timeout_s=config.read_timeout_s)
        return cls(ser, config)

    # --- lifecycle ---

    def start(self) -> "Session":
        if self._closed:
            raise SessionClosedError("session is closed")
        if self._thread and self._thread.is_alive():
            return self
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="iscctl-dispatch", daemon=True)
        self._thread.start()
        logger.info("Dispatch loop started (tick %.3fs)", self.config.tick_interval_s)
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        t = self._thread
        if t and t is not threading.current_thread():
            t.join(timeout)
        self._thread = None
        logger.info("Dispatch loop stopped")

    def close(self) -> None:
        if self._closed:
            return
        self.stop(timeout=self.config.tick_interval_s + self.config.long_timeout_s)
        self._closed = True
        self._broadcast.close()
        with self._lock:
            close = getattr(self._transport, "close", None)
            if close:
                close()

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # --- producer side ---

    def _check(self, command: Command) -> None:
        if self._closed:
            raise SessionClosedError("session is closed")
        spec = lookup(command)
        hw = self.config.hardware
        if not spec.supported_on(hw):
            if self.config.unsupported_policy == "reject":
                raise UnsupportedCommandError(f"{spec.name} ({spec.token}) is not implemented on {hw}")
            logger.warning("%s (%s) is not implemented on %s", spec.name, spec.token, hw)

    def enqueue(self, priority: Priority, command: Command) -> None:
        """Queue *command*; it runs on the next tick. Never blocks."""
        self._check(command)
        self._inbox.put(Message(Priority(priority), command))

    def subscribe(self) -> ResponseStream:
        return self._broadcast.subscribe()

    def send(self, command: Command) -> Response:
        """Run *command* now, outside the queue. The Response is returned, not published."""
        if self._thread is not None and threading.current_thread() is self._thread:
            raise RuntimeError("send() called from the dispatch thread")
        self._check(command)
        with self._lock:
            return self._execute(command)

    @property
    def pending(self) -> int:
        return self._inbox.qsize() + len(self._carry)

    # --- dispatch side ---

    def _drain(self) -> List[Message]:
        batch = []
        while True:
            try:
                batch.append(self._inbox.get_nowait())
            except queue.Empty:
                return batch

    def _execute(self, command: Command) -> Response:
        # one Response per command, whatever goes wrong inside
        try:
            return execute(self._transport, command, self.config)
        except Exception as e:
            logger.exception("%s: dispatch failed", command.kind)
            return DecodeFailure(command, "", f"dispatch failed: {e!r}")

    def run_once(self) -> List[Response]:
        """One drain/sort/dispatch pass. Returns the Responses published."""
        batch = self._carry + self._drain()
        self._carry = []
        if not batch:
            return []

        ordered = sorted(batch, key=lambda m: m.priority, reverse=True)
        published: List[Response] = []
        for i, msg in enumerate(ordered):
            if not self._lock.acquire(timeout=self.config.lock_timeout_s):
                logger.warning("Link busy; %d message(s) carried over to the next tick", len(ordered) - i)
                self._carry = ordered[i:]
                break
            try:
                response = self._execute(msg.command)
            finally:
                self._lock.release()
            self._broadcast.publish(response)
            published.append(response)
        return published

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("Dispatch pass failed")
            self._stop.wait(self.config.tick_interval_s)
