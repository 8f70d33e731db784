"""Logging configuration for oob_config.

Provides:
- Console output plus a rotating log file
- A separate performance log fed by the ``timed`` decorator
- The JSON-lines audit log of attribute changes

Environment Variables:
    OOB_CONFIG_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    OOB_CONFIG_LOG_FILE: Path to log file (default: ~/.oob-config/oob-config.log)
    OOB_CONFIG_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    OOB_CONFIG_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from oob_config.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("wait_for_task")
    async def wait_for_task(transport, uri):
        ...
"""
import asyncio
import functools
import logging
import os
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

from .audit_log import setup_audit_logging

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("oob_config.perf")
main_logger = logging.getLogger("oob_config")

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(name)-25s | %(levelname)-7s | %(message)s"
PERF_FORMAT = "%(asctime)s.%(msecs)03d | PERF | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("OOB_CONFIG_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".oob-config" / "oob-config.log"
    return Path(os.environ.get("OOB_CONFIG_LOG_FILE", str(default_path)))


def setup_logging() -> None:
    """Configure the ``oob_config`` logger tree.

    The console handler respects OOB_CONFIG_LOG_LEVEL; the file handlers
    capture everything from DEBUG up.
    """
    log_level = get_log_level()
    log_file = get_log_file()
    max_bytes = int(os.environ.get("OOB_CONFIG_LOG_MAX_SIZE", "10")) * 1024 * 1024
    backup_count = int(os.environ.get("OOB_CONFIG_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)
    main_format = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    perf_log_file = log_file.parent / "oob-config-perf.log"
    perf_handler = RotatingFileHandler(
        perf_log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    perf_handler.setLevel(logging.DEBUG)
    perf_handler.setFormatter(logging.Formatter(PERF_FORMAT, datefmt=DATE_FORMAT))

    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    main_logger.addHandler(console_handler)
    main_logger.addHandler(file_handler)

    # Perf records only go to their own file
    perf_logger.setLevel(logging.DEBUG)
    perf_logger.addHandler(perf_handler)
    perf_logger.propagate = False

    setup_audit_logging(str(log_file.parent))

    main_logger.info(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def _device_of(args: tuple, device_id: Optional[str]) -> str:
    if device_id:
        return device_id
    # Methods carry it on self, module functions on their transport argument
    if args and hasattr(args[0], "device_id"):
        return str(args[0].device_id)
    return "N/A"


def _log_timing(operation: str, dev_id: str, start: float, error: Optional[Exception] = None) -> None:
    elapsed = (time.perf_counter() - start) * 1000
    if error is None:
        perf_logger.info(f"{operation:20s} | {dev_id:15s} | {elapsed:8.2f}ms | OK")
    else:
        perf_logger.warning(
            f"{operation:20s} | {dev_id:15s} | {elapsed:8.2f}ms | FAIL: {error}"
        )


def timed(operation: str, device_id: Optional[str] = None):
    """Decorator to log execution time of sync/async functions.

    Args:
        operation: Name of the operation (e.g., "fetch_registry", "wait_for_task")
        device_id: Optional device identifier, otherwise taken from the first
            argument's ``device_id``
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            dev_id = _device_of(args, device_id)
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log_timing(operation, dev_id, start, e)
                raise
            _log_timing(operation, dev_id, start)
            return result

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            dev_id = _device_of(args, device_id)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _log_timing(operation, dev_id, start, e)
                raise
            _log_timing(operation, dev_id, start)
            return result

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


@asynccontextmanager
async def timed_section(operation: str, device_id: Optional[str] = None):
    """Async context manager for timing code sections.

    Usage:
        async with timed_section("patch_attributes", device_id="idrac-r740"):
            await client.patch(...)
    """
    start = time.perf_counter()
    try:
        yield
    except Exception as e:
        _log_timing(operation, device_id or "N/A", start, e)
        raise
    _log_timing(operation, device_id or "N/A", start)
