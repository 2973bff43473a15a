"""
==========================
Database - Common SQL Statements
==========================

This module provides the T-SQL statements the backup runner sends to SQL Server.

Features:
- Gives the catalog query listing all online, non-system databases.
- Gives the full backup statement (single file device, overwrite, progress every N percent).


Usage:
>>> from sqlbackup.db.sql import common
>>> common.SQL_GET_ONLINE_USER_DATABASES  # Access the enumeration query
>>> common.sql_backup_database(10)  # Backup statement reporting every 10%
"""

# Built-in databases that are never backed up by enumeration
SYSTEM_DATABASES = ("master", "tempdb", "model", "msdb")

# state = 0 means the database is ONLINE
_SYSTEM_DATABASES_SQL = ", ".join("'%s'" % name for name in SYSTEM_DATABASES)

SQL_GET_ONLINE_USER_DATABASES = f"""
    SELECT name
    FROM sys.databases
    WHERE name NOT IN ({_SYSTEM_DATABASES_SQL})
    AND state = 0"""

# Parameters: database name, file path, backup set name, backup set description
SQL_BACKUP_DATABASE = """
    BACKUP DATABASE ?
    TO DISK = ?
    WITH INIT,
         NAME = ?,
         DESCRIPTION = ?,
         STATS = {stats}"""

# SQL Server progress message, e.g. "10 percent processed."
PROGRESS_MESSAGE_PATTERN = r"(\d+) percent processed"


def sql_backup_database(progress_step: int = 10) -> str:
    return SQL_BACKUP_DATABASE.format(stats=int(progress_step))
