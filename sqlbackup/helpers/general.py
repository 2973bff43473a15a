"""
==========================
Helpers - General Operations
==========================

This module provides general helper functions for the application, including directory management and time utilities.

Features:
- `backup_timestamp`: Second-resolution timestamp used in backup file names.
- `backup_file_name`: Name of the backup artifact for a database.
- `ensure_dirs`: Ensure local directories exist.


Usage:
>>> from sqlbackup.helpers.general import backup_file_name, ensure_dirs
>>> backup_file_name("Sales")  # 'Sales_20250102030405.bak'
>>> ensure_dirs(paths.primary_path)
"""

import os
import datetime
from typing import Optional

from sqlbackup.logger import logger

BACKUP_EXTENSION = ".bak"


def backup_timestamp(now: Optional[datetime.datetime] = None) -> str:
    """
    Get a second-resolution local timestamp, e.g. `20250102030405`.

    Returns:
        str: Timestamp formatted as yyyyMMddHHmmss.
    """
    now = now or datetime.datetime.now()
    return now.strftime("%Y%m%d%H%M%S")


def backup_file_name(database_name: str, now: Optional[datetime.datetime] = None) -> str:
    return f"{database_name}_{backup_timestamp(now)}{BACKUP_EXTENSION}"


def ensure_dirs(*dirs) -> None:
    """
    Ensure the given directories exist.
    A directory that cannot be created is logged; whatever is written into it will fail and be logged too.

    Args:
        *dirs (str | Path): Directories to create. Empty entries are skipped.

    Returns:
        None
    """
    for d in dirs:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
        except Exception as e:
            logger.error("Failed to create directory %s: %s", d, e)
