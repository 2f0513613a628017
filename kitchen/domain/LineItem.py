"""LineItem domain entity: one priced ingredient usage with its stored line cost."""
import math
from typing import Any, Optional

from kitchen.utilities.constants import DEFAULT_UNIT


def calculate_item_cost(cost: float, quantity: float) -> float:
    """Line cost rule: cost per unit times quantity used."""
    return cost * quantity


def _as_number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"'{field}' must be a number, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError:
        raise ValueError(f"'{field}' is out of range") from None
    if not math.isfinite(number):
        raise ValueError(f"'{field}' must be finite")
    return number


class LineItem:
    def __init__(self, id: Any, name: str, cost_per_unit: float, quantity_used: float,
                 unit: str = DEFAULT_UNIT, total_item_cost: Optional[float] = None):
        self._id = id
        self.name = name
        self.cost_per_unit = cost_per_unit
        self.quantity_used = quantity_used
        self.unit = unit or DEFAULT_UNIT
        # Stored, not recomputed on read
        if total_item_cost is None:
            total_item_cost = calculate_item_cost(cost_per_unit, quantity_used)
        self.total_item_cost = total_item_cost

    @property
    def id(self):
        return self._id

    def __eq__(self, other) -> bool:
        if not isinstance(other, LineItem):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None

    def __str__(self) -> str:
        return (f"{self.name} - {self.quantity_used} {self.unit} @ {self.cost_per_unit}/{self.unit}"
                f" = {self.total_item_cost}")

    def __repr__(self) -> str:
        return f"LineItem(id={self._id!r}, {self})"

    @staticmethod
    def from_dict(data):
        '''Creates a LineItem from its persisted dictionary. Ignores unknown keys.

        Raises KeyError, TypeError or ValueError when required fields are missing
        or have the wrong shape.
        '''
        if not isinstance(data, dict):
            raise TypeError(f"line item must be an object, got {type(data).__name__}")
        item_id = data["id"]
        if isinstance(item_id, bool) or not isinstance(item_id, (int, str)):
            raise TypeError(f"'id' must be an integer or string, got {type(item_id).__name__}")
        name = data["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError("'name' must be a non-empty string")
        cost = _as_number(data["costPerUnit"], "costPerUnit")
        quantity = _as_number(data["quantityUsed"], "quantityUsed")
        unit = data.get("unit")
        if unit is not None and not isinstance(unit, str):
            raise TypeError("'unit' must be a string")
        total = data.get("totalItemCost")
        if total is not None:
            total = _as_number(total, "totalItemCost")
        return LineItem(item_id, name, cost, quantity,
                        unit=(unit or "").strip() or DEFAULT_UNIT, total_item_cost=total)

    def to_dict(self):
        '''Converts the LineItem to a dictionary for JSON persistence.'''
        return {
            "id": self._id,
            "name": self.name,
            "costPerUnit": self.cost_per_unit,
            "quantityUsed": self.quantity_used,
            "unit": self.unit,
            "totalItemCost": self.total_item_cost,
        }
