"""EventBus — thread-safe pub/sub for simulation notifications.

The simulation never touches view objects.  Everything a view needs to
react to (base hits, wave clears, game over, log lines) leaves the core
through this bus, either as messages on a subscriber Queue (polled by the
view once per frame) or as synchronous listener calls made while the
publishing tick is still on the stack.
"""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable

Listener = Callable[[dict], None]

DEFAULT_QUEUE_SIZE = 256


class EventBus:
    """Simple thread-safe pub/sub for pushing events to subscribers."""

    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._lock = threading.Lock()
        self._queue_size = queue_size
        # (queue, event_type filter or None for all)
        self._subscribers: list[tuple[queue.Queue, str | None]] = []
        self._listeners: dict[str, list[Listener]] = {}

    def subscribe(self, event_type: str | None = None) -> queue.Queue:
        """Subscribe to events. Returns a Queue that receives messages.

        When *event_type* is given only messages of that type are delivered.
        """
        q: queue.Queue = queue.Queue(maxsize=self._queue_size)
        with self._lock:
            self._subscribers.append((q, event_type))
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers = [
                (sub, flt) for sub, flt in self._subscribers if sub is not q
            ]

    def add_listener(self, event_type: str, callback: Listener) -> None:
        """Register *callback* to be called synchronously for *event_type*."""
        with self._lock:
            self._listeners.setdefault(event_type, []).append(callback)

    def remove_listener(self, event_type: str, callback: Listener) -> None:
        with self._lock:
            callbacks = self._listeners.get(event_type, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def publish(self, event_type: str, data: dict[str, Any] | None = None) -> None:
        msg: dict[str, Any] = {"type": event_type}
        if data is not None:
            msg["data"] = data
        with self._lock:
            targets = [q for q, flt in self._subscribers if flt in (None, event_type)]
            callbacks = list(self._listeners.get(event_type, ()))
        for q in targets:
            self._put_drop_oldest(q, msg)
        # Listeners run outside the lock so they may publish in turn.
        for callback in callbacks:
            callback(msg)

    @staticmethod
    def _put_drop_oldest(q: queue.Queue, msg: dict) -> None:
        try:
            q.put_nowait(msg)
        except queue.Full:
            # Drop oldest message so the freshest state change always lands.
            try:
                q.get_nowait()
            except queue.Empty:
                pass
            try:
                q.put_nowait(msg)
            except queue.Full:
                pass
