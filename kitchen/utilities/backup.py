"""
Backup utility for the ledger slot file.
Keeps a copy of a slot file before it is overwritten, e.g. when a corrupt
payload is about to be replaced by a fresh ledger.
"""
import shutil
from datetime import datetime
from pathlib import Path
import logging

from kitchen.utilities.config import BACKUP_KEEP

logger = logging.getLogger(__name__)


class BackupManager:
    """Manages timestamped backups of data files."""

    def __init__(self, data_dir: Path, backup_dir: Path = None, keep: int = BACKUP_KEEP):
        self.data_dir = Path(data_dir)
        self.backup_dir = Path(backup_dir) if backup_dir else (self.data_dir / 'backups')
        self.keep = keep

    def create_backup(self, filename) -> bool:
        """Create a timestamped backup of a data file.

        filename is resolved against data_dir unless it is an absolute path.
        """
        source = Path(filename)
        if not source.is_absolute():
            source = self.data_dir / source
        if not source.exists():
            logger.warning(f"File not found for backup: {filename}")
            return False
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            backup_name = f"{source.stem}_{timestamp}{source.suffix}"
            destination = self.backup_dir / backup_name

            shutil.copy2(source, destination)
            logger.info(f"Backup created: {backup_name}")

            self._cleanup_old_backups(source.name)
            return True

        except OSError as e:
            logger.error(f"Backup failed for {filename}: {e}")
            return False

    def _cleanup_old_backups(self, filename: str):
        """Remove old backups, keeping only the most recent ones."""
        backups = self.list_backups(filename)
        for backup in backups[self.keep:]:
            try:
                (self.backup_dir / backup['name']).unlink()
                logger.info(f"Removed old backup: {backup['name']}")
            except OSError as e:
                logger.error(f"Failed to remove backup {backup['name']}: {e}")

    def list_backups(self, filename: str = None) -> list:
        """List all backups or backups for a specific file, newest first."""
        if not self.backup_dir.exists():
            return []
        if filename:
            pattern = f"{Path(filename).stem}_*{Path(filename).suffix}"
        else:
            pattern = "*"

        # Timestamped names sort chronologically
        backups = sorted(self.backup_dir.glob(pattern), key=lambda p: p.name, reverse=True)

        return [
            {
                'name': b.name,
                'size': b.stat().st_size,
                'created': datetime.fromtimestamp(b.stat().st_mtime).strftime('%Y-%m-%d %H:%M:%S')
            }
            for b in backups
        ]
