"""Change notifications for stored records.

Views register a callback per table and re-run the pure calendar/hours
functions with fresh data when notified. The transport (websocket, SSE,
polling) is up to the subscriber.
"""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from flask import current_app

logger = logging.getLogger(__name__)

EXTENSION_KEY = "shiftboard.events"
ALL_TABLES = "*"

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    action: str
    record_id: str | None = None
    payload: Dict[str, Any] = field(default_factory=dict)


Callback = Callable[[ChangeEvent], None]


class ChangeNotifier:
    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callback]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, table: str, callback: Callback) -> Callable[[], None]:
        """Register *callback* for *table* (or ``"*"``); returns an unsubscribe function."""

        with self._lock:
            self._subscribers[table].append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(table, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def publish(self, event: ChangeEvent) -> int:
        with self._lock:
            callbacks = list(self._subscribers.get(event.table, ())) + list(self._subscribers.get(ALL_TABLES, ()))
        delivered = 0
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s %s", callback, event.action, event.table)
                continue
            delivered += 1
        return delivered

    def subscriber_count(self, table: str) -> int:
        with self._lock:
            return len(self._subscribers.get(table, ()))


def get_notifier() -> ChangeNotifier:
    return current_app.extensions[EXTENSION_KEY]


def notify(table: str, action: str, record_id: str | None = None, **payload: Any) -> None:
    get_notifier().publish(ChangeEvent(table=table, action=action, record_id=record_id, payload=payload))
