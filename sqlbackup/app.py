import asyncio
import os
from pathlib import Path

from sqlbackup.helpers.config import (
    CONFIG_FILE_NAME,
    DATABASE_FILE_NAME,
    PATH_FILE_NAME,
    get_base_dir,
    load_database_list,
    load_path_config,
    load_settings,
)
from sqlbackup.helpers.db import SqlServer, get_all_databases
from sqlbackup.helpers.general import ensure_dirs
from sqlbackup.logger import configure_logger, logger, shutdown_logger
from sqlbackup.workers import BackupWorker


def run_backup(base_dir=None, settings=None, engine=None) -> int:
    """
    Run one backup pass.

      1. read `path.txt` (abort quietly if it is missing or empty)
      2. start logging to `<primary>/Log.txt`
      3. read `database.txt`, or list all online user databases
      4. back up each database, copying each file to the secondary path

    Args:
        base_dir (str | Path, optional): Directory holding the configuration files.
            Defaults to the executable's directory.
        settings (Settings, optional): Engine/tuning settings. Defaults to `.config.yml` in base_dir.
        engine (optional): Backup engine adapter. Defaults to the local SQL Server.

    Returns:
        int: Process exit code, always 0.
    """
    base_dir = Path(base_dir or get_base_dir())

    paths = load_path_config(os.path.join(base_dir, PATH_FILE_NAME))
    if paths is None:
        return 0

    # Only the backup path; copies into a missing copy path fail and are logged
    ensure_dirs(paths.primary_path)
    configure_logger(paths.log_file)

    try:
        if settings is None:
            settings = load_settings(os.path.join(base_dir, CONFIG_FILE_NAME))
        if engine is None:
            engine = SqlServer(settings)

        databases = load_database_list(
            os.path.join(base_dir, DATABASE_FILE_NAME))
        if not databases:
            databases = get_all_databases(engine)

        worker = BackupWorker(paths, engine, settings)
        asyncio.run(worker.run(databases))
    except Exception as e:
        # Logged here so it still reaches Log.txt, on one line like every other entry
        logger.error("Fatal error in backup run: %s", e)
        raise
    finally:
        shutdown_logger()

    return 0


def start_app():
    """
    Entry point of the backup runner.
    Fatal errors are logged by `run_backup` and re-raised.
    """
    try:
        return run_backup()
    except KeyboardInterrupt:
        return 0
