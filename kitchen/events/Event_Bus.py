"""Simple Event Bus / Observer implementation for ledger changes.

Event names:
  ledger.item_added -> payload {"item": LineItem}
  ledger.item_removed -> payload {"item": LineItem}
  ledger.cleared -> payload {"count": int}
  ledger.corrupt_state -> payload {"path": str, "reason": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
from collections import defaultdict
from typing import Callable, Any, Dict, List
import logging

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
LEDGER_ITEM_ADDED = "ledger.item_added"
LEDGER_ITEM_REMOVED = "ledger.item_removed"
LEDGER_CLEARED = "ledger.cleared"
LEDGER_CORRUPT_STATE = "ledger.corrupt_state"

LEDGER_EVENTS = (LEDGER_ITEM_ADDED, LEDGER_ITEM_REMOVED, LEDGER_CLEARED, LEDGER_CORRUPT_STATE)


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any = None):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


__all__ = [
	'EventBus', 'LEDGER_EVENTS',
	'LEDGER_ITEM_ADDED', 'LEDGER_ITEM_REMOVED', 'LEDGER_CLEARED', 'LEDGER_CORRUPT_STATE'
]
