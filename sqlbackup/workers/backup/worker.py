import asyncio
import functools
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from sqlbackup.logger import logger
from sqlbackup.helpers.config import PathConfig, Settings
from sqlbackup.helpers.copy import copy_backup_file
from sqlbackup.helpers.db import BackupArtifact, backup_database

Replicator = Callable[[str, str], Awaitable[bool]]


@dataclass
class PendingReplication:
    artifact: BackupArtifact
    task: asyncio.Task


class BackupWorker:
    """
    Backs up each database in turn into the primary directory and copies every
    new backup file to the secondary directory (if configured):
      - the copy of backup N runs while backup N+1 is taken
      - the copy of backup N+1 only starts once the copy of backup N is done
      - one database failing never stops the others
    """

    def __init__(self, paths: PathConfig, engine, settings: Optional[Settings] = None,
                 replicate: Optional[Replicator] = None):
        self.paths = paths
        self.engine = engine
        self.settings = settings or Settings()
        self.replicate = replicate or functools.partial(
            copy_backup_file, chunk_size=self.settings.chunk_size)
        self.pending: Optional[PendingReplication] = None

    async def await_pending_replication(self) -> None:
        """Wait for the in-flight copy, if any, and clear it."""
        pending, self.pending = self.pending, None
        if pending is None:
            return
        try:
            await pending.task
        except Exception as e:
            logger.error("Copy of %s failed: %s", pending.artifact.file_path, e)

    async def launch_replication(self, artifact: BackupArtifact) -> None:
        """Replace the in-flight copy with a copy of `artifact`, after the previous one finished."""
        await self.await_pending_replication()
        task = asyncio.create_task(self.replicate(
            artifact.file_path, str(self.paths.secondary_path)))
        self.pending = PendingReplication(artifact=artifact, task=task)

    async def backup_one(self, database_name: str) -> BackupArtifact:
        def on_progress(percent: int):
            logger.info("Backing up %s: %s%% completed.",
                        database_name, percent)

        return await asyncio.to_thread(
            backup_database, self.engine, database_name, str(self.paths.primary_path), on_progress)

    async def run(self, databases: Iterable[str]) -> list[BackupArtifact]:
        artifacts = []
        for database in databases:
            name = (database or "").strip()
            if not name:
                continue

            try:
                artifact = await self.backup_one(name)
                artifacts.append(artifact)

                if self.paths.secondary_path:
                    await self.launch_replication(artifact)
            except Exception as e:
                logger.error("Error backing up database %s: %s", name, e)

        # Ensure the last copy completes
        await self.await_pending_replication()
        logger.info("Backup run finished: %d database(s) processed", len(artifacts))
        return artifacts
