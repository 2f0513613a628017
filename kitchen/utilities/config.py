"""Configuration management for the Kitchen Costing application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

from kitchen.utilities.constants import STORAGE_KEY as _DEFAULT_STORAGE_KEY

BASE_DIR: Final[Path] = Path(__file__).parent.parent

# Load environment variables from .env file if it exists
_env_path = BASE_DIR / '.env'
if _env_path.exists():
    load_dotenv(_env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '127.0.0.1')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# Storage
DATA_DIR: Final[Path] = Path(os.getenv('KITCHEN_DATA_DIR', str(BASE_DIR / 'data')))
STORAGE_KEY: Final[str] = os.getenv('KITCHEN_STORAGE_KEY', _DEFAULT_STORAGE_KEY)
BACKUP_KEEP: Final[int] = int(os.getenv('BACKUP_KEEP', '10'))

# Activity feed
MAX_EVENTS: Final[int] = int(os.getenv('MAX_EVENTS', '300'))
