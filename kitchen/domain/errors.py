"""Error types raised by the costing ledger and its store."""
from pathlib import Path
from typing import Dict, Optional

from kitchen.utilities.constants import VALIDATION_MESSAGE


class KitchenError(Exception):
    """Base class for all kitchen costing errors."""


class ValidationError(KitchenError, ValueError):
    """Raised by Ledger.add when one or more input fields are invalid.

    ``fields`` maps each offending field name to a human readable message.
    """

    def __init__(self, fields: Dict[str, str], message: str = VALIDATION_MESSAGE):
        self.fields = dict(fields)
        self.message = message
        super().__init__(f"{message} Invalid: {', '.join(sorted(self.fields))}")

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        fields: Dict[str, str] = {}
        for err in exc.errors():
            loc = err.get('loc') or ('input',)
            fields.setdefault(str(loc[0]), err.get('msg', 'Invalid value'))
        return cls(fields)

    def to_dict(self):
        return {"error": self.message, "fields": self.fields}


class CorruptStateError(KitchenError):
    """Raised by LedgerStore.load when the persisted payload cannot be parsed."""

    def __init__(self, path: Optional[Path], reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt ledger state in {path}: {reason}")


__all__ = ['KitchenError', 'ValidationError', 'CorruptStateError']
