"""Utility modules for locking, retries and logging."""
from .audit_log import ChangeRecord, ChangeTracker, get_recent_changes, setup_audit_logging
from .connection import RETRYABLE_EXCEPTIONS, with_retry
from .locks import KeyedLock
from .logging_config import perf_logger, setup_logging, timed, timed_section

__all__ = [
    "ChangeRecord",
    "ChangeTracker",
    "get_recent_changes",
    "setup_audit_logging",
    "RETRYABLE_EXCEPTIONS",
    "with_retry",
    "KeyedLock",
    "perf_logger",
    "setup_logging",
    "timed",
    "timed_section",
]
