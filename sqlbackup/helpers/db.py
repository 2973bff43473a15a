"""
==========================
Database Enumeration and Backup Module
==========================

This module talks to the local SQL Server instance: it lists the databases to back up and drives
the engine's native `BACKUP DATABASE` for one database at a time.

Features:
- `SqlServer`: engine adapter over ODBC (trusted connection, encrypted transport, server certificate trusted).
- `get_all_databases`: all online, non-system databases, or [] if the server cannot be queried.
- `backup_database`: full backup of one database to `<name>_<yyyyMMddHHmmss>.bak`, reporting progress
  through a callback every N percent.

Usage:
>>> from sqlbackup.helpers.db import SqlServer, get_all_databases, backup_database
>>> engine = SqlServer(settings)
>>> databases = get_all_databases(engine)
>>> artifact = backup_database(engine, "Sales", "D:/Backups", on_progress=lambda pct: print(pct))
"""

import os
import re
import datetime
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from sqlbackup.logger import logger
from sqlbackup.helpers.config import Settings
from sqlbackup.helpers.general import backup_file_name
from sqlbackup.db.sql import common as common_sql_statements

ProgressCallback = Callable[[int], None]

_PROGRESS_RE = re.compile(common_sql_statements.PROGRESS_MESSAGE_PATTERN)


@dataclass
class BackupArtifact:
    database_name: str
    file_path: str
    created_at: datetime.datetime = field(default_factory=datetime.datetime.now)


def build_connection_string(settings: Settings) -> str:
    parts = [
        f"DRIVER={{{settings.driver}}}",
        f"SERVER={settings.host}",
    ]
    if settings.trusted_connection:
        parts.append("Trusted_Connection=yes")
    parts.append(f"Encrypt={'yes' if settings.encrypt else 'no'}")
    if settings.trust_server_certificate:
        parts.append("TrustServerCertificate=yes")
    return ";".join(parts) + ";"


def report_progress(cursor, on_progress: Optional[ProgressCallback]) -> None:
    """
    Drain every result set of a running statement and forward the
    "N percent processed." messages to `on_progress`.

    The engine only advances the backup while its messages are consumed, so this
    runs on the same thread as the backup call; `on_progress` must be cheap.

    Args:
        cursor: ODBC cursor the backup statement was executed on.
        on_progress (Callable[[int], None] | None): Called with each percentage.
    """
    while True:
        for _, message in getattr(cursor, "messages", None) or []:
            match = _PROGRESS_RE.search(str(message))
            if match and on_progress is not None:
                on_progress(int(match.group(1)))
        if not cursor.nextset():
            break


class SqlServer:
    """
    Native backup engine adapter for the local SQL Server instance.
    The ODBC driver module is only imported on first connection.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.connection_string = build_connection_string(self.settings)
        self._pyodbc_module: Optional[Any] = None

    @property
    def pyodbc(self):
        """Lazy load pyodbc module."""
        if self._pyodbc_module is None:
            import pyodbc
            self._pyodbc_module = pyodbc
        return self._pyodbc_module

    def _connect(self, autocommit: bool = False):
        return self.pyodbc.connect(self.connection_string, autocommit=autocommit)

    def list_databases(self) -> list[str]:
        conn = self._connect()
        try:
            conn.timeout = self.settings.query_timeout
            cur = conn.cursor()
            cur.execute(common_sql_statements.SQL_GET_ONLINE_USER_DATABASES)
            return [row[0] for row in cur.fetchall()]
        finally:
            conn.close()

    def backup(self, database_name: str, file_path: str, on_progress: Optional[ProgressCallback] = None) -> None:
        # BACKUP cannot run inside a user transaction
        conn = self._connect(autocommit=True)
        try:
            cur = conn.cursor()
            cur.execute(
                common_sql_statements.sql_backup_database(
                    self.settings.progress_step),
                (database_name, file_path,
                 f"{database_name} Backup", f"Backup of {database_name}"),
            )
            report_progress(cur, on_progress)
        finally:
            conn.close()


def get_all_databases(engine) -> list[str]:
    """
    Retrieve all online, non-system databases from the server, in server order.
    Any connection or query error is logged and an empty list is returned;
    callers treat it as "nothing to back up".

    Args:
        engine: Backup engine adapter exposing `list_databases()`.

    Returns:
        list[str]: Database names.
    """
    try:
        databases = list(engine.list_databases())
        logger.info("Successfully retrieved all databases from the server.")
        return databases
    except Exception as e:
        logger.error("Error retrieving databases: %s", e)
        return []


def backup_database(engine, database_name: str, backup_dir, on_progress: Optional[ProgressCallback] = None) -> BackupArtifact:
    """
    Full (non-incremental) backup of one database into `backup_dir`.

    The artifact is returned even when the backup failed: its file may be missing or
    incomplete, the failure is only visible in the log.

    Args:
        engine: Backup engine adapter exposing `backup(database_name, file_path, on_progress)`.
        database_name (str): Database to back up.
        backup_dir (str | Path): Primary backup directory.
        on_progress (Callable[[int], None] | None): Percentage-complete callback.

    Returns:
        BackupArtifact: Database name, destination file path and creation time.
    """
    created_at = datetime.datetime.now()
    file_path = os.path.join(
        backup_dir, backup_file_name(database_name, created_at))
    artifact = BackupArtifact(database_name, file_path, created_at)

    try:
        engine.backup(database_name, file_path, on_progress)
        logger.info("Successfully backed up database %s to %s",
                    database_name, file_path)
    except Exception as e:
        logger.error("Error backing up database %s: %s", database_name, e)

    return artifact
