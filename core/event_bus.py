"""In-process notifications from the orchestrator to front ends."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("verinews.events")

EventHandler = Callable[[dict[str, Any]], None]

SUBMISSION_STATE = "submission.state"
HISTORY_CHANGED = "history.changed"
ANY_EVENT = "*"


class EventBus:
    """Delivers submission and history events to subscribers.

    Handlers registered under ``ANY_EVENT`` receive every event with the
    event name added to the payload as ``event``. A handler that raises is
    logged and skipped; the remaining handlers still run.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        targets = [(h, payload) for h in self._handlers.get(event_name, [])]
        targets += [(h, {"event": event_name, **payload}) for h in self._handlers.get(ANY_EVENT, [])]
        for handler, data in targets:
            try:
                handler(data)
            except Exception:
                logger.exception("Subscriber %r failed on %s", handler, event_name)
