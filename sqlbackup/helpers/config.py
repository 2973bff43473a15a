"""
==========================
Helpers - Configurations
==========================

This module provides the configuration for a backup run: the fixed file names looked up next to the
executable, the engine/tuning settings from `.config.yml`, and the loaders for `path.txt` and `database.txt`.

Features:
- Resolves the base directory (directory of the frozen executable or of the launched script).
- Loads engine and tuning settings from a YAML file, falling back to defaults for anything missing.
- Loads the backup paths (primary + optional secondary) and derives the log file location.
- Loads the list of databases to back up, or the empty sentinel meaning "back up everything".


Usage:
>>> from sqlbackup.helpers.config import load_settings, load_path_config, load_database_list
>>> settings = load_settings(BASE_DIR / CONFIG_FILE_NAME)
>>> paths = load_path_config(BASE_DIR / PATH_FILE_NAME)  # None -> abort the run
>>> databases = load_database_list(BASE_DIR / DATABASE_FILE_NAME)  # [] -> enumerate all
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from sqlbackup.logger import logger

# =========================
# CONFIG
# =========================

PATH_FILE_NAME = "path.txt"
DATABASE_FILE_NAME = "database.txt"
CONFIG_FILE_NAME = ".config.yml"
LOG_FILE_NAME = "Log.txt"


def get_base_dir() -> Path:
    """
    Directory holding `path.txt`, `database.txt` and `.config.yml`.

    Returns:
        Path: Directory of the frozen executable, or of the launched script.
    """
    if getattr(sys, "frozen", False):
        return Path(os.path.dirname(os.path.abspath(sys.executable)))
    return Path(os.path.dirname(os.path.abspath(sys.argv[0])))


@dataclass
class Settings:
    # Server
    host: str = "localhost"
    driver: str = "ODBC Driver 18 for SQL Server"
    trusted_connection: bool = True
    encrypt: bool = True
    trust_server_certificate: bool = True
    query_timeout: int = 120

    # Backup
    progress_step: int = 10

    # Copy
    chunk_size: int = 1024 * 1024


@dataclass
class PathConfig:
    primary_path: Path
    secondary_path: Optional[Path] = None

    @property
    def log_file(self) -> Path:
        return Path(os.path.join(self.primary_path, LOG_FILE_NAME))


def load_settings(config_file) -> Settings:
    """
    Load engine and tuning settings from a YAML file.
    A missing file, or missing keys, fall back to the defaults of `Settings`.

    Args:
        config_file (str | Path): Path to the `.config.yml` file.

    Returns:
        Settings: The loaded settings.
    """
    settings = Settings()
    if not os.path.isfile(config_file):
        return settings

    with open(config_file, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}

    server = cfg.get("server") or {}
    backup = cfg.get("backup") or {}
    copy = cfg.get("copy") or {}

    settings.host = str(server.get("host", settings.host))
    settings.driver = str(server.get("driver", settings.driver))
    settings.trusted_connection = bool(
        server.get("trusted_connection", settings.trusted_connection))
    settings.encrypt = bool(server.get("encrypt", settings.encrypt))
    settings.trust_server_certificate = bool(
        server.get("trust_server_certificate", settings.trust_server_certificate))
    settings.query_timeout = int(
        server.get("query_timeout", settings.query_timeout))

    settings.progress_step = int(
        backup.get("progress_step", settings.progress_step))
    settings.chunk_size = int(copy.get("chunk_size", settings.chunk_size))

    return settings


def _read_lines(path) -> list[str]:
    # Undecodable bytes (e.g. a file saved as ANSI) become U+FFFD instead of failing the whole file
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        return f.read().splitlines()


def load_path_config(path_file) -> Optional[PathConfig]:
    """
    Read the backup paths file.
    Line 1 is the primary backup directory, an optional line 2 the secondary (replication) directory.

    Returns None when the run must be aborted (file missing, unreadable or empty).
    Every branch logs exactly one message; at this point no log file is known yet,
    so these messages only reach the console.

    Args:
        path_file (str | Path): Path to `path.txt`.

    Returns:
        PathConfig | None: The loaded paths, or None to abort.
    """
    if not os.path.isfile(path_file):
        logger.error("Path file is missing. Cannot proceed.")
        return None

    try:
        lines = _read_lines(path_file)
    except Exception as e:
        logger.error("Error reading path file: %s", e)
        return None

    if not lines or not lines[0].strip():
        logger.error("Path file is empty. No backup paths provided.")
        return None

    primary = Path(lines[0].strip())
    secondary = None
    if len(lines) > 1 and lines[1].strip():
        secondary = Path(lines[1].strip())

    paths = PathConfig(primary_path=primary, secondary_path=secondary)
    logger.info("Backup path: %s, copy path: %s",
                paths.primary_path, paths.secondary_path or "(none)")
    return paths


def load_database_list(database_file) -> list[str]:
    """
    Read the list of databases to back up, one name per non-blank line.
    An empty list means "back up all online, non-system databases".

    Args:
        database_file (str | Path): Path to `database.txt`.

    Returns:
        list[str]: Trimmed database names in file order, or [] to enumerate all.
    """
    if not os.path.isfile(database_file):
        logger.info("Database file is missing. Backup all databases.")
        return []

    try:
        lines = _read_lines(database_file)
    except Exception as e:
        logger.error("Error reading database file: %s. Backup all databases.", e)
        return []

    databases = [line.strip() for line in lines if line.strip()]
    if not databases:
        logger.info("Database file is empty. Backup all databases.")
        return []

    logger.info("Read %d database(s) from %s", len(databases), database_file)
    return databases
