"""Ledger repository helpers (file persistence of the named slot)."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from kitchen.domain.Ledger import Ledger
from kitchen.domain.LineItem import LineItem
from kitchen.domain.errors import CorruptStateError
from kitchen.events.Event_Bus import EventBus, LEDGER_CORRUPT_STATE
from kitchen.infra.paths import DATA_DIR, STORAGE_KEY, slot_file
from kitchen.utilities.backup import BackupManager

logger = logging.getLogger(__name__)


class LedgerStore:
    """Reads and writes the ledger's items as a JSON array under one named slot.

    The slot lives at ``<data_dir>/<slot>.json``. The file is opened and closed
    within each call.
    """

    def __init__(self, data_dir: Path = DATA_DIR, slot: str = STORAGE_KEY):
        self.data_dir = Path(data_dir)
        self.slot = slot

    @property
    def path(self) -> Path:
        return slot_file(self.data_dir, self.slot)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> List[LineItem]:
        """Load line items from the slot; absent or empty slot means no items."""
        path = self.path
        if not path.exists():
            return []
        with open(path, 'rb') as f:
            raw_bytes = f.read()
        try:
            raw = raw_bytes.decode('utf-8')
        except UnicodeDecodeError as e:
            raise self._corrupt(f"not UTF-8 text: {e}")
        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and oversized integer literals
            raise self._corrupt(f"invalid JSON: {type(e).__name__}: {e}")
        if data is None:
            return []
        if not isinstance(data, list):
            raise self._corrupt(f"expected a list, got {type(data).__name__}")

        items: List[LineItem] = []
        seen_ids = set()
        for index, entry in enumerate(data):
            try:
                item = LineItem.from_dict(entry)
            except (KeyError, TypeError, ValueError, OverflowError) as e:
                raise self._corrupt(f"entry {index}: {e!r}")
            if item.id in seen_ids:
                raise self._corrupt(f"entry {index}: duplicate id {item.id!r}")
            seen_ids.add(item.id)
            items.append(item)
        return items

    def save(self, items: Iterable[LineItem]) -> None:
        """Overwrite the slot with the given items (atomic replace)."""
        payload = [item.to_dict() for item in items]
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.data_dir), prefix=f".{self.slot}_", suffix=".json"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(payload, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def erase(self) -> None:
        """Remove the slot entirely."""
        self.path.unlink(missing_ok=True)
        logger.info("Erased ledger slot %s", self.path)

    def _corrupt(self, reason: str) -> CorruptStateError:
        logger.error("Corrupt ledger payload in %s: %s", self.path, reason)
        return CorruptStateError(self.path, reason)


def hydrate_ledger(store: LedgerStore, *, backups: Optional[BackupManager] = None,
                   event_bus: Optional[EventBus] = None, **kwargs) -> Tuple[Ledger, Optional[str]]:
    """Build the startup Ledger from the store (graceful on corrupt state).

    Returns (ledger, warning). On a corrupt payload the slot file is copied to
    the backup directory when a BackupManager is given, and an empty ledger
    bound to the same store is returned together with a warning message.
    """
    try:
        return Ledger.from_store(store, event_bus=event_bus, **kwargs), None
    except CorruptStateError as e:
        logger.warning("Starting with an empty ledger: %s", e)
        if backups is not None:
            backups.create_backup(store.path.resolve())
        if event_bus is not None:
            event_bus.publish(LEDGER_CORRUPT_STATE, {"path": str(e.path), "reason": e.reason})
        warning = "Saved costing data could not be read and was reset."
        return Ledger(store=store, event_bus=event_bus, **kwargs), warning


__all__ = ['LedgerStore', 'hydrate_ledger']
