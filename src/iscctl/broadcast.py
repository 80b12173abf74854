"""Fan-out of Responses to any number of subscribers.

Each subscriber has its own bounded buffer. When a subscriber falls behind,
the oldest undelivered Responses are dropped; publishing never blocks the
dispatch loop.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Deque, Iterator, List, Optional

from .cmds.base import Response

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100

__all__ = ["ResponseBroadcast", "ResponseStream", "DEFAULT_CAPACITY"]


class ResponseStream:
    """One subscriber's live feed. Iterating blocks until the stream is closed."""

    def __init__(self, hub: "ResponseBroadcast", capacity: int):
        self._hub = hub
        self._items: Deque[Response] = deque(maxlen=capacity)
        self._cond = threading.Condition()
        self._closed = False
        self.dropped = 0

    def _push(self, response: Response) -> None:
        with self._cond:
            if self._closed:
                return
            if len(self._items) == self._items.maxlen:
                self.dropped += 1
            self._items.append(response)
            self._cond.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[Response]:
        """Next Response, or None on timeout or once closed and drained."""
        with self._cond:
            if not self._cond.wait_for(lambda: self._items or self._closed, timeout):
                return None
            return self._items.popleft() if self._items else None

    def get_nowait(self) -> Optional[Response]:
        with self._cond:
            return self._items.popleft() if self._items else None

    def drain(self) -> List[Response]:
        with self._cond:
            items = list(self._items)
            self._items.clear()
            return items

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._hub._remove(self)
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[Response]:
        while True:
            item = self.get()
            if item is None:
                return
            yield item

    def __enter__(self) -> "ResponseStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ResponseBroadcast:
    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._subs: List[ResponseStream] = []
        self._lock = threading.Lock()

    def subscribe(self) -> ResponseStream:
        stream = ResponseStream(self, self.capacity)
        with self._lock:
            self._subs.append(stream)
        return stream

    def _remove(self, stream: ResponseStream) -> None:
        with self._lock:
            if stream in self._subs:
                self._subs.remove(stream)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subs)

    def publish(self, response: Response) -> int:
        """Deliver to every current subscriber; returns how many received it."""
        with self._lock:
            subs = list(self._subs)
        for stream in subs:
            stream._push(response)
        return len(subs)

    def close(self) -> None:
        with self._lock:
            subs = list(self._subs)
        for stream in subs:
            stream.close()
