"""
src/monitoring/bus.py
─────────────────────
In-process publish/subscribe for pipeline events.

Subscribers register for one channel (e.g. "alert-bridge_1") or for all
channels (channel=None). A failing subscriber is logged and skipped; it
never interrupts delivery to the others or the ingestion that published.

The bus also keeps a bounded buffer of recent events for the dashboard
feed and the /api/events endpoint.
"""
from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from threading import RLock
from typing import Any

from src.monitoring.events import Event

logger = logging.getLogger(__name__)

Handler = Callable[[Event], None]

_RECENT_CAPACITY = 200
_ERROR_LOG_INTERVAL_S = 10.0


@dataclass(frozen=True)
class PublishedEvent:
    channel: str
    published_at: datetime
    event: Event

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel,
            "publishedAt": self.published_at.isoformat(),
            "type": type(self.event).__name__,
            "payload": self.event.payload(),
        }


class EventBus:
    def __init__(self, recent_capacity: int = _RECENT_CAPACITY):
        self._lock = RLock()
        self._subscribers: dict[str | None, list[Handler]] = {}
        self._recent: deque[PublishedEvent] = deque(maxlen=recent_capacity)
        self._last_error_log_ts = 0.0

    def subscribe(self, handler: Handler, channel: str | None = None) -> Callable[[], None]:
        """Register a handler; returns a callable that unsubscribes it."""
        with self._lock:
            self._subscribers.setdefault(channel, []).append(handler)

        def _unsubscribe() -> None:
            with self._lock:
                handlers = self._subscribers.get(channel, [])
                if handler in handlers:
                    handlers.remove(handler)

        return _unsubscribe

    def _handlers_for(self, channel: str) -> list[Handler]:
        with self._lock:
            return [*self._subscribers.get(channel, ()), *self._subscribers.get(None, ())]

    def publish(self, events: Iterable[Event]) -> None:
        for event in events:
            channel = event.channel
            with self._lock:
                self._recent.append(PublishedEvent(channel, datetime.now(tz=UTC), event))
            for handler in self._handlers_for(channel):
                try:
                    handler(event)
                except Exception:
                    self._log_handler_failure(channel)

    def _log_handler_failure(self, channel: str) -> None:
        now = time.monotonic()
        if (now - self._last_error_log_ts) >= _ERROR_LOG_INTERVAL_S:
            self._last_error_log_ts = now
            logger.warning("Event subscriber failed on channel %r; skipping it.", channel, exc_info=True)

    def recent(self, limit: int = 50, channel: str | None = None) -> list[PublishedEvent]:
        """Most recent events first."""
        with self._lock:
            items = list(self._recent)
        if channel is not None:
            items = [item for item in items if item.channel == channel]
        return items[::-1][:max(0, limit)]
