"""Costing summary for display.

Turns a Ledger into the list rows and running total a page or API client renders.
"""
from typing import Any, Dict, Iterable, List

from kitchen.utilities.constants import EMPTY_LEDGER_MESSAGE
from kitchen.utilities.currency import format_zar

__all__ = ["format_quantity", "describe_item", "build_summary"]


def format_quantity(value) -> str:
    """Render 1.0 as '1' and 2.5 as '2.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def describe_item(item) -> Dict[str, Any]:
    row = item.to_dict()
    row['display'] = (f"{format_quantity(item.quantity_used)} {item.unit} @ "
                      f"{format_zar(item.cost_per_unit)}/{item.unit}")
    row['total_display'] = format_zar(item.total_item_cost)
    return row

def build_summary(ledger, warnings: Iterable[str] = ()) -> Dict[str, Any]:
    """Summary of the ledger for rendering.

    Returns structure:
    {
      'items': [ { id, name, costPerUnit, quantityUsed, unit, totalItemCost, display, total_display }, ... ],
      'count': int,
      'total': float,
      'total_display': 'R 0.00',
      'empty_message': str | None,
      'warnings': [str, ...]
    }
    """
    rows: List[Dict[str, Any]] = [describe_item(item) for item in ledger.items()]
    total = ledger.total()
    return {
        'items': rows,
        'count': len(rows),
        'total': total,
        'total_display': format_zar(total),
        'empty_message': None if rows else EMPTY_LEDGER_MESSAGE,
        'warnings': [w for w in warnings if w],
    }
