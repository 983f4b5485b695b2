#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging configuration and utilities
"""

# Standard library imports
import io
import queue
import sys
import threading
import time
from datetime import datetime
from pathlib import Path

import logging

# Local imports
from config import (
    APP_NAME,
    LOG_FILE_PATTERN,
    LOG_MAX_AGE_SECONDS,
    LOG_MAX_FILE_SIZE_MB_DEFAULT,
    LOG_QUEUE_MAX_SIZE,
    LOG_SEPARATOR_WIDTH,
    LOG_TIMESTAMP_FORMAT,
)

# Add custom TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

def trace(self, message, *args, **kwargs):
    """Log a trace message (ultra-detailed, below DEBUG)"""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)

# Add trace() method to Logger class
logging.Logger.trace = trace

# Global log mode (set by setup_logging)
_CURRENT_LOG_MODE = 'customer'

_LOG_FORMATS = {
    'customer': "%(_when)s | %(message)s",
    'verbose': "%(_when)s | %(levelname)-7s | %(message)s",
    'debug': "%(_when)s | %(levelname)-7s | %(name)-15s | %(funcName)-20s | %(message)s",
}

_LOG_LEVELS = {
    'customer': logging.INFO,
    'verbose': logging.DEBUG,
    'debug': TRACE,
}


def get_log_mode() -> str:
    """Get the current logging mode"""
    return _CURRENT_LOG_MODE


class SizeRotatingCompositeHandler(logging.Handler):
    """
    A handler that delegates to an inner file handler and rolls over
    to a new file when the current file size reaches a threshold.

    - Creates files as: base.ext, base.ext.1, base.ext.2, ...
    - Does not delete on rotation (retention handled by cleanup_logs)
    """
    def __init__(self, base_path: Path, create_handler_fn, max_bytes: int):
        super().__init__()
        self.base_path = Path(base_path)
        self.create_handler_fn = create_handler_fn
        self.max_bytes = max_bytes
        self._index = 0
        self.current_path = self._compute_current_path()
        self.current_handler = self.create_handler_fn(self.current_path)
        self._stored_formatter = None

    def _compute_current_path(self) -> Path:
        if self._index == 0:
            return self.base_path
        return self.base_path.with_name(f"{self.base_path.name}.{self._index}")

    def _maybe_rotate(self):
        current_size = self.current_path.stat().st_size if self.current_path.exists() else 0
        if current_size < self.max_bytes:
            return
        self.current_handler.close()
        self._index += 1
        self.current_path = self._compute_current_path()
        self.current_handler = self.create_handler_fn(self.current_path)
        self.current_handler.setLevel(self.level)
        if self._stored_formatter is not None:
            self.current_handler.setFormatter(self._stored_formatter)

    def emit(self, record):
        try:
            self._maybe_rotate()
            self.current_handler.emit(record)
        except Exception:
            self.handleError(record)

    def setFormatter(self, fmt):
        self._stored_formatter = fmt
        self.current_handler.setFormatter(fmt)
        super().setFormatter(fmt)

    def setLevel(self, level):
        super().setLevel(level)
        self.current_handler.setLevel(level)

    def close(self):
        self.current_handler.close()
        super().close()


class QueueHandler(logging.Handler):
    """A queue-based handler that never blocks the calling thread"""
    def __init__(self, target_handler: logging.Handler):
        super().__init__()
        self.target_handler = target_handler
        self.queue = queue.Queue(maxsize=LOG_QUEUE_MAX_SIZE)
        self._stop_event = threading.Event()
        self.worker_thread = threading.Thread(target=self._worker, daemon=True, name="LogQueueWorker")
        self.worker_thread.start()

    def _worker(self):
        """Emit queued records to the target handler until stopped"""
        while not self._stop_event.is_set():
            try:
                record = self.queue.get(timeout=0.1)
            except queue.Empty:
                continue
            if record is None:  # Sentinel value to stop
                break
            try:
                self.target_handler.handle(record)
            finally:
                self.queue.task_done()

    def emit(self, record):
        """Queue the log record without blocking"""
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            # Drop the record rather than block the recognition loop
            pass

    def flush(self):
        """Wait until every queued record has been written"""
        if self.worker_thread.is_alive():
            self.queue.join()
        self.target_handler.flush()

    def close(self):
        """Stop the worker thread gracefully"""
        self._stop_event.set()
        try:
            self.queue.put_nowait(None)
        except queue.Full:
            pass
        if self.worker_thread.is_alive():
            self.worker_thread.join(timeout=1.0)
        super().close()


class SafeStreamHandler(logging.StreamHandler):
    """A stream handler that tolerates missing or broken streams"""
    def __init__(self, stream=None):
        if stream is None:
            stream = io.StringIO()
        super().__init__(stream)

    def emit(self, record):
        try:
            msg = self.format(record)
            self.stream.write(msg + self.terminator)
            self.stream.flush()
        except (BlockingIOError, BrokenPipeError, OSError, ValueError):
            # Stream is blocking or broken - skip this message
            pass


class _ConsoleFormatter(logging.Formatter):
    def format(self, record):
        record._when = time.strftime("%H:%M:%S", time.localtime(record.created))
        return super().format(record)


class _FileFormatter(logging.Formatter):
    def format(self, record):
        record._when = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(record.created))
        return super().format(record)


def _create_file_handler(log_mode: str) -> SizeRotatingCompositeHandler:
    """Create the size-rotating session log file handler"""
    from .paths import get_logs_dir
    logs_dir = get_logs_dir()

    # One log file per session, named after its start time
    timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
    log_file = logs_dir / f"{APP_NAME}_{timestamp}.log"
    max_bytes = int(LOG_MAX_FILE_SIZE_MB_DEFAULT * 1024 * 1024)

    def _factory_plain(p: Path):
        return logging.FileHandler(p, encoding='utf-8')

    file_handler = SizeRotatingCompositeHandler(log_file, _factory_plain, max_bytes)
    file_handler.setFormatter(_FileFormatter(_LOG_FORMATS[log_mode]))
    file_handler.setLevel(_LOG_LEVELS[log_mode])
    return file_handler


def setup_logging(log_mode: str = 'customer', *, write_logs: bool = True):
    """
    Setup logging configuration with three modes.

    Args:
        log_mode: 'customer' (clean logs), 'verbose' (developer), or 'debug' (ultra-detailed)
        write_logs: If False, skip creating the session log file.
    """
    global _CURRENT_LOG_MODE
    if log_mode not in _LOG_FORMATS:
        raise ValueError(f"Unknown log mode: {log_mode!r} (expected one of {sorted(_LOG_FORMATS)})")
    _CURRENT_LOG_MODE = log_mode

    # Console output goes to stderr so that recognized text on stdout stays parseable
    output_stream = sys.stderr if sys.stderr is not None else sys.stdout
    safe_handler = SafeStreamHandler(output_stream)
    safe_handler.setFormatter(_ConsoleFormatter(_LOG_FORMATS[log_mode]))

    # Wrap in queue handler to prevent blocking
    console_handler = QueueHandler(safe_handler)
    console_handler.setLevel(_LOG_LEVELS[log_mode])

    file_handler = None
    if write_logs:
        try:
            file_handler = _create_file_handler(log_mode)
        except OSError as e:
            # If file logging fails, continue without it
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.addHandler(console_handler)
    if file_handler:
        root.addHandler(file_handler)

    # Root logger must be at TRACE to allow all handlers to receive all messages
    root.setLevel(TRACE)

    logger = logging.getLogger("startup")
    log_target = file_handler.base_path.name if file_handler else "logs disabled"
    if log_mode == 'customer':
        logger.debug(f"{APP_NAME} started ({log_target})")
    else:
        logger.info("=" * LOG_SEPARATOR_WIDTH)
        logger.info(f"{APP_NAME} - Starting... ({log_target})")
        logger.info("=" * LOG_SEPARATOR_WIDTH)
        if file_handler:
            logger.debug(f"Log file location: {file_handler.base_path.absolute()}")


def shutdown_logging():
    """Flush and close every handler installed by setup_logging"""
    root = logging.getLogger()
    for handler in list(root.handlers):
        handler.flush()
        root.removeHandler(handler)
        handler.close()


def get_logger(name: str = "glyphmatch") -> logging.Logger:
    """Get a logger instance"""
    return logging.getLogger(name)


def cleanup_logs():
    """
    Clean up old log files based on age.

    Logs older than LOG_MAX_AGE_SECONDS are deleted; there is no limit
    on file count or total size.
    """
    from .paths import get_user_data_dir
    logs_dir = get_user_data_dir() / "logs"
    if not logs_dir.exists():
        return

    now = time.time()
    for log_file in logs_dir.glob(LOG_FILE_PATTERN):
        try:
            if now - log_file.stat().st_mtime > LOG_MAX_AGE_SECONDS:
                log_file.unlink()
        except OSError as e:
            # Don't log this error to avoid recursion
            print(f"Warning: Failed to remove old log {log_file.name}: {e}", file=sys.stderr)


# ==================== Pretty Logging Helpers ====================

def log_section(logger: logging.Logger, title: str, icon: str = "📌", details: dict = None, mode: str = None):
    """
    Log a section with title and optional details

    Args:
        logger: Logger instance
        title: Main title text (will be uppercased in verbose/debug mode)
        icon: Emoji icon to use
        details: Optional dict of key-value pairs to display
        mode: 'customer' (simple), 'verbose' (detailed), or 'debug' (ultra-detailed).
              If None, uses current global log mode.

    Example:
        log_section(log, "Reference images loaded", "🔤", {"Count": 62, "Directory": "refs"})
    """
    if mode is None:
        mode = get_log_mode()

    if mode == 'customer':
        if details:
            detail_str = ", ".join(f"{k}: {v}" for k, v in details.items())
            logger.info(f"{icon} {title} ({detail_str})")
        else:
            logger.info(f"{icon} {title}")
    else:
        logger.info("=" * LOG_SEPARATOR_WIDTH)
        logger.info(f"{icon} {title.upper()}")
        if details:
            for key, value in details.items():
                logger.info(f"   📋 {key}: {value}")
        logger.info("=" * LOG_SEPARATOR_WIDTH)


def log_success(logger: logging.Logger, message: str, icon: str = "✅"):
    """
    Log a success message

    Example:
        log_success(log, "Sub-images saved for labeling")
    """
    logger.info(f"{icon} {message}")
