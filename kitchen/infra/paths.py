from pathlib import Path

from kitchen.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR, STORAGE_KEY

# Centralized data location (single source of truth)
DATA_DIR = Path(_CONFIGURED_DATA_DIR).resolve()


def slot_file(data_dir: Path, slot: str) -> Path:
    """Path of the JSON file holding the named slot inside data_dir."""
    return Path(data_dir) / f'{slot}.json'


__all__ = ['DATA_DIR', 'STORAGE_KEY', 'slot_file']
