"""Web-facing observer for ledger events.

Subscribes to an EventBus for every ledger.* event and keeps a lightweight
in-memory ring buffer of recent events that the web layer can poll.

  * Each event is stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A max_events cap prevents unbounded memory growth.
  * A Lock guards the buffer; publishers run on threadpool workers.
"""
from __future__ import annotations
from typing import List, Dict, Any, Optional
from datetime import datetime, timezone
from threading import Lock

from kitchen.events.Event_Bus import EventBus, LEDGER_EVENTS
from kitchen.utilities.config import MAX_EVENTS


class ActivityFeed:
    def __init__(self, max_events: int = MAX_EVENTS):
        self.max_events = max_events
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1

    def attach(self, bus: EventBus) -> "ActivityFeed":
        for event_name in LEDGER_EVENTS:
            bus.subscribe(event_name, self.record)
        return self

    def record(self, event_name: str, payload: Any):  # signature expected by EventBus
        evt = {
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        }
        if isinstance(payload, dict):
            item = payload.get('item')
            if item is not None and hasattr(item, 'to_dict'):
                evt['item'] = item.to_dict()
            for k in ('count', 'path', 'reason'):
                if k in payload:
                    evt[k] = payload[k]
        with self._lock:
            evt['id'] = self._next_id
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def get_events(self, since: Optional[int] = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['ActivityFeed']
