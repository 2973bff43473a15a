"""
==========================
File Copy Helper Functions
==========================

This module provides helper functions for copying backup files to the secondary (replication) location.
Files are streamed in bounded chunks, so the memory used does not depend on the size of the backup.

Features:
- `stream_copy_file`: Copy a file chunk by chunk through a `.part` file, then atomically replace the destination.
- `copy_backup_file`: Async, never-raising copy of a backup file into a directory, logging the outcome.


Usage:
>>> from sqlbackup.helpers.copy import copy_backup_file
>>> ok = await copy_backup_file('D:/Backups/Sales_20250102030405.bak', 'E:/Replica')
"""

import asyncio
import os
import shutil

from sqlbackup.logger import logger

DEFAULT_CHUNK_SIZE = 1024 * 1024


def stream_copy_file(src: str, dst: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Copy src to dst, overwriting dst if it exists.
    Data is written to `dst + ".part"` first; the partial file is removed on failure.

    Args:
        src (str): Source file path.
        dst (str): Destination file path.
        chunk_size (int, optional): Bytes read per chunk. Defaults to 1 MiB.

    Returns:
        int: Number of bytes copied.
    """
    tmp_dst = dst + ".part"
    try:
        with open(src, "rb") as fsrc, open(tmp_dst, "wb") as fdst:
            shutil.copyfileobj(fsrc, fdst, chunk_size)
            copied = fdst.tell()
        os.replace(tmp_dst, dst)
        return copied
    except Exception:
        try:
            if os.path.exists(tmp_dst):
                os.remove(tmp_dst)
        except Exception:
            logger.debug("Failed to cleanup partial copy: %s", tmp_dst)
        raise


async def copy_backup_file(source_file, destination_dir, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
    """
    Copy a backup file into `destination_dir` under its own base name.
    The copy runs on a worker thread; success or failure is logged and never raised.

    Args:
        source_file (str | Path): Backup file in the primary directory.
        destination_dir (str | Path): Secondary directory.
        chunk_size (int, optional): Bytes read per chunk. Defaults to 1 MiB.

    Returns:
        bool: True if the file was copied.
    """
    source_file = str(source_file)
    destination_file = os.path.join(
        destination_dir, os.path.basename(source_file))

    try:
        await asyncio.to_thread(stream_copy_file, source_file, destination_file, chunk_size)
        logger.info("Successfully copied %s to %s",
                    source_file, destination_file)
        return True
    except Exception as e:
        logger.error("Error copying %s to %s: %s",
                     source_file, destination_file, e)
        return False
