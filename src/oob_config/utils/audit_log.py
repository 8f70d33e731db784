"""Audit logging for attribute changes.

Every PATCH of device attributes is recorded as one JSON line on the
``oob_config.audit`` logger, with the values before and after the change.
"""
import json
import logging
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

audit_logger = logging.getLogger("oob_config.audit")

DEFAULT_AUDIT_DIR = "~/.oob-config"

MASK = "********"


def setup_audit_logging(log_dir: Optional[str] = None) -> None:
    """Configure audit logging to ``<log_dir>/audit.log``."""
    log_dir = os.path.expanduser(log_dir or DEFAULT_AUDIT_DIR)
    Path(log_dir).mkdir(parents=True, exist_ok=True)

    audit_logger.setLevel(logging.INFO)
    audit_logger.handlers.clear()

    handler = RotatingFileHandler(
        os.path.join(log_dir, "audit.log"),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    audit_logger.addHandler(handler)
    audit_logger.propagate = False


@dataclass
class ChangeRecord:
    """Record of one attribute change on an endpoint."""
    timestamp: str
    endpoint: str
    operation: str
    success: bool
    parameters: dict
    before_state: Optional[dict] = None
    after_state: Optional[dict] = None
    job_uri: Optional[str] = None
    error: Optional[str] = None

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=None)

    @classmethod
    def from_json(cls, json_str: str) -> "ChangeRecord":
        return cls(**json.loads(json_str))


class ChangeTracker:
    """Write change records for one endpoint."""

    def __init__(self, endpoint: str, masked: Optional[set[str]] = None):
        self.endpoint = endpoint
        # Attribute names whose values must not appear in the log
        self.masked = masked or set()

    def _mask(self, values: Optional[dict]) -> Optional[dict]:
        if values is None:
            return None
        return {k: (MASK if k in self.masked else v) for k, v in values.items()}

    def log_change(
        self,
        operation: str,
        parameters: dict,
        success: bool,
        before_state: Optional[dict] = None,
        after_state: Optional[dict] = None,
        job_uri: Optional[str] = None,
        error: Optional[str] = None,
    ) -> ChangeRecord:
        """Log a configuration change and return the record written."""
        record = ChangeRecord(
            timestamp=datetime.now(timezone.utc).isoformat(),
            endpoint=self.endpoint,
            operation=operation,
            success=success,
            parameters=self._mask(parameters) or {},
            before_state=self._mask(before_state),
            after_state=self._mask(after_state),
            job_uri=job_uri,
            error=error,
        )
        audit_logger.info(record.to_json())
        return record


def get_recent_changes(
    log_file: Optional[str] = None,
    endpoint: Optional[str] = None,
    limit: int = 100,
) -> list[ChangeRecord]:
    """Read recent changes from the audit log, most recent first."""
    log_file = os.path.expanduser(log_file or os.path.join(DEFAULT_AUDIT_DIR, "audit.log"))
    if not os.path.exists(log_file):
        return []

    records = []
    with open(log_file, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                record = ChangeRecord.from_json(line)
            except (json.JSONDecodeError, TypeError):
                continue  # Skip malformed lines
            if endpoint and record.endpoint != endpoint:
                continue
            records.append(record)

    return list(reversed(records[-limit:]))
