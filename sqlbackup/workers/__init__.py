"""
==========================
Worker Management Module
==========================

This module provides the workers of the backup runner.

Features:
- Implements a `BackupWorker` class.
- Backs up each requested database into the primary backup directory.
- Copies each backup file to the secondary directory while the next backup runs.
- Waits for the last copy before returning.

Usage:
>>> backup_worker = BackupWorker(paths, engine, settings)
>>> asyncio.run(backup_worker.run(databases))
"""

from sqlbackup.workers.backup import BackupWorker, PendingReplication
