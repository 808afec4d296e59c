"""
Configuration for Bar Archive.

A single Config decides where the application keeps its files:
- the SQLite database
- the uploads root that stored image paths are relative to
- the backups directory that receives default export archives

Environment variables:
    BAR_ARCHIVE_ENV   'production' (default) or 'development'
    BAR_ARCHIVE_HOME  base directory override for production
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .constants import (
    BACKUP_FILENAME_PATTERN,
    BACKUP_TIMESTAMP_FORMAT,
    DATABASE_FILENAME,
)

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Config:
    """
    Filesystem layout for one environment.

    Args:
        environment: 'production' uses $BAR_ARCHIVE_HOME or ~/.bar_archive;
            'development' uses the project's data/ directory
        base_dir: Explicit base directory, overriding both
    """

    def __init__(self, environment: str = "production", base_dir: Optional[Union[str, Path]] = None):
        self.environment = environment
        if base_dir is not None:
            self.base_dir = Path(base_dir)
        elif environment == "development":
            self.base_dir = PROJECT_ROOT / "data"
        else:
            home = os.environ.get("BAR_ARCHIVE_HOME")
            self.base_dir = Path(home).expanduser() if home else Path.home() / ".bar_archive"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def database_path(self) -> Path:
        return self.base_dir / DATABASE_FILENAME

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL of the database file (forward slashes on every OS)."""
        return f"sqlite:///{self.database_path.as_posix()}"

    @property
    def uploads_dir(self) -> Path:
        """Root directory that Image.file_path values are relative to."""
        return self.base_dir / "uploads"

    @property
    def backups_dir(self) -> Path:
        """Directory for default export archives."""
        return self.base_dir / "backups"

    def get_backup_path(self, now: Optional[datetime] = None) -> Path:
        """
        Default archive path for an export started at `now`.

        Example:
            >>> Config(base_dir="/data").get_backup_path(datetime(2024, 5, 1, 12, 30))
            PosixPath('/data/backups/202405011230_recipes.zip')
        """
        stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
        return self.backups_dir / BACKUP_FILENAME_PATTERN.format(timestamp=stamp)

    def ensure_directories(self) -> None:
        """Create the base, uploads and backups directories if missing."""
        for directory in (self.base_dir, self.uploads_dir, self.backups_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def __repr__(self) -> str:
        return f"Config(environment='{self.environment}', base_dir='{self.base_dir}')"


_config: Optional[Config] = None


def get_config(environment: Optional[str] = None) -> Config:
    """
    Shared Config, created on first call.

    The environment is only used when the instance is first created; later
    calls asking for a different one get the existing instance and a warning.
    """
    global _config

    if _config is None:
        _config = Config(environment or os.environ.get("BAR_ARCHIVE_ENV", "production"))
    elif environment is not None and environment != _config.environment:
        logger.warning(
            f"Ignoring environment='{environment}': config already created for "
            f"'{_config.environment}'"
        )
    return _config


def set_config(config: Config) -> None:
    """Install an explicit configuration (CLI --home, tests)."""
    global _config
    _config = config


def reset_config() -> None:
    """Drop the shared configuration so the next get_config() rebuilds it."""
    global _config
    _config = None
