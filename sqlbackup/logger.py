"""
==========================
Logger Module
==========================

This module provides a logging setup for the backup runner using Python's built-in logging library.
Every message goes to the console and, once the backup paths are known, is appended to `Log.txt`
inside the primary backup directory. A queue is used so that messages emitted from worker threads
(backup progress, file copies) are written by a single listener thread.

Features:
- Uses `QueueHandler` to send log records to a queue.
- Uses `QueueListener` to listen for log records and write them to file and console.
- Appends to the log file, never rotates it.
- Formats log messages as `yyyy-MM-dd HH:mm:ss - message`.
- A failure to write the log file is reported on the console only, it never stops the run.

Usage:
>>> from sqlbackup.logger import logger, configure_logger, shutdown_logger
>>> configure_logger("D:/Backups/Log.txt")
>>> logger.info("This is an info message.")
>>> shutdown_logger()  # Important to stop the listener when done.
"""

import logging
import logging.handlers
import queue as std_queue
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Public logger object other modules import
logger = logging.getLogger("sqlbackup")
logger.setLevel(logging.INFO)


def _console_handler() -> logging.Handler:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    return console


# If nothing configures logging, fall back to console so imports can safely log.
if not logger.handlers:
    logger.addHandler(_console_handler())

# Internal state
_configured = False
_queue: Optional[std_queue.Queue] = None
_listener: Optional[logging.handlers.QueueListener] = None


class AppendFileHandler(logging.FileHandler):
    """
    Append-only file handler that never raises.
    Any failure to open or write the file is printed to stdout instead.
    """

    def __init__(self, filename):
        super().__init__(filename, mode="a", encoding="utf-8", delay=True)

    def emit(self, record):
        # FileHandler opens the stream outside of its own error handling when delay=True
        try:
            super().emit(record)
        except Exception:
            self.handleError(record)

    def handleError(self, record):
        err = sys.exc_info()[1]
        print(f"Failed to log message to file: {err}", file=sys.stdout)


def configure_logger(log_file):
    """
    Configure the logger with file and console handlers behind a queue.
    Calling it again before `shutdown_logger()` is a no-op.

    Args:
        log_file (str | Path): File the log lines are appended to.
    """
    global _configured, _queue, _listener

    if _configured:
        return

    # Remove the lightweight/default handlers we added on import so they don't duplicate output
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    # Create queue and a QueueHandler on the public logger
    _queue = std_queue.Queue(-1)
    queue_handler = logging.handlers.QueueHandler(_queue)
    logger.addHandler(queue_handler)

    # Create real handlers that the listener will own
    file_handler = AppendFileHandler(log_file)
    file_handler.setFormatter(fmt)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(fmt)

    _listener = logging.handlers.QueueListener(
        _queue, file_handler, console_handler)
    _listener.start()

    _configured = True


def shutdown_logger():
    """
    Shutdown the logger by stopping the listener and closing all handlers.
    Pending records are flushed to the file before it is closed; afterwards
    the console fallback is restored so the logger can be configured again.
    """
    global _configured, _queue, _listener

    if _listener:
        handlers = list(_listener.handlers)
        try:
            _listener.stop()
        except Exception:
            pass
        for h in handlers:
            try:
                h.flush()
                h.close()
            except Exception:
                pass
        _listener = None

    for h in list(logger.handlers):
        try:
            h.flush()
            h.close()
        except Exception:
            pass
        logger.removeHandler(h)

    logger.addHandler(_console_handler())
    _queue = None
    _configured = False
