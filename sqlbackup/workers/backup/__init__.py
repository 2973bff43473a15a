"""
==========================
Database Backup Worker Module
==========================

This module provides the worker that runs one backup pass over a list of databases.
Each database is backed up by SQL Server into the primary directory; the resulting file is then copied
to the secondary directory in the background while the next database is being backed up.

Features:
- Implements a `BackupWorker` class driven by asyncio.
- Runs each engine backup call on a worker thread, logging progress every 10%.
- Holds at most one in-flight copy (`PendingReplication`), awaited before the next one starts.
- Logs and skips per-database failures.

Usage:
>>> backup_worker = BackupWorker(paths, engine=SqlServer(settings), settings=settings)
>>> artifacts = asyncio.run(backup_worker.run(["Sales", "HR"]))
"""
from sqlbackup.workers.backup.worker import *
