"""Ledger aggregate: ordered collection of LineItem entries with a running total."""
import logging
import threading
import time
from typing import Callable, Iterable, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from kitchen.domain.LineItem import LineItem, calculate_item_cost
from kitchen.domain.errors import ValidationError
from kitchen.events.Event_Bus import (
    EventBus, LEDGER_ITEM_ADDED, LEDGER_ITEM_REMOVED, LEDGER_CLEARED
)
from kitchen.utilities.validators import LineItemInput

logger = logging.getLogger(__name__)


class Ledger:
    """Insertion-ordered list of line items.

    Every successful mutation is written through ``store`` before the method
    returns. If the store raises, the in-memory change is undone and the error
    propagates to the caller.
    """

    def __init__(self, store=None, items: Iterable[LineItem] = (),
                 event_bus: Optional[EventBus] = None,
                 clock: Callable[[], float] = time.time):
        self._store = store
        self._items: List[LineItem] = list(items)
        self._event_bus = event_bus
        self._clock = clock
        # Guards items and id allocation across threadpool requests
        self._lock = threading.RLock()
        self._last_id = max((i.id for i in self._items if _is_int_id(i.id)), default=0)

    @classmethod
    def from_store(cls, store, **kwargs) -> "Ledger":
        '''
        Hydrates a Ledger from the store's named slot.
        CorruptStateError from the store is not handled here.
        '''
        return cls(store=store, items=store.load(), **kwargs)

    # --- Observer helpers -------------------------------------------------
    def _publish(self, event_name: str, payload):
        if self._event_bus is not None:
            self._event_bus.publish(event_name, payload)

    # --- Identity ---------------------------------------------------------
    def _next_id(self) -> int:
        # Millisecond timestamps, bumped past the last id handed out
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    # --- Persistence ------------------------------------------------------
    def _persist(self):
        if self._store is not None:
            self._store.save(self._items)

    # --- Operations -------------------------------------------------------
    def add(self, name, cost_per_unit, quantity_used, unit=None) -> LineItem:
        '''
        Validates the raw inputs, appends a new LineItem and persists the list.
        Raises ValidationError without touching the list when any field is invalid.
        '''
        try:
            data = LineItemInput(name=name, cost_per_unit=cost_per_unit,
                                 quantity_used=quantity_used, unit=unit)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from None

        with self._lock:
            item = LineItem(
                self._next_id(),
                data.name,
                data.cost_per_unit,
                data.quantity_used,
                unit=data.unit,
                total_item_cost=calculate_item_cost(data.cost_per_unit, data.quantity_used),
            )
            self._items.append(item)
            try:
                self._persist()
            except Exception:
                self._items.pop()
                raise
            logger.debug("Added line item %s (%s)", item.id, item.name)
            self._publish(LEDGER_ITEM_ADDED, {"item": item})
        return item

    def remove(self, item_id) -> bool:
        '''
        Removes the item with the given id. Returns False if no such item exists.
        '''
        with self._lock:
            for index, item in enumerate(self._items):
                if item.id == item_id:
                    break
            else:
                return False

            del self._items[index]
            try:
                self._persist()
            except Exception:
                self._items.insert(index, item)
                raise
            logger.debug("Removed line item %s (%s)", item.id, item.name)
            self._publish(LEDGER_ITEM_REMOVED, {"item": item})
        return True

    def clear(self) -> None:
        '''
        Empties the ledger and erases the stored slot.
        '''
        with self._lock:
            previous = self._items
            self._items = []
            try:
                if self._store is not None:
                    self._store.erase()
            except Exception:
                self._items = previous
                raise
            logger.debug("Cleared %d line items", len(previous))
            self._publish(LEDGER_CLEARED, {"count": len(previous)})

    def total(self):
        '''
        Sum of totalItemCost over all items, recomputed on every call.
        '''
        with self._lock:
            return sum(item.total_item_cost for item in self._items)

    def items(self) -> Tuple[LineItem, ...]:
        '''
        Returns a read-only snapshot of the items in insertion order.
        '''
        with self._lock:
            return tuple(self._items)

    def get(self, item_id) -> Optional[LineItem]:
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __str__(self) -> str:
        items = self.items()
        items_str = ",\n\t".join(str(item) for item in items)
        return f"Items:\n\t{items_str}\nTotal: {self.total()}"

    def __repr__(self) -> str:
        return self.__str__()


def _is_int_id(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


__all__ = ['Ledger']
