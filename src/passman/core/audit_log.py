# Vault - Audit Logging
#
# Append-only audit trail for every vault access.
# Events are written as structured JSON lines, one file per day.
# Never log passwords, notes or key material.

import hashlib
import logging
import os
import socket
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

import structlog

AUDIT_LOGGER_NAME = "passman.audit"
DEFAULT_AUDIT_DIR = Path("~/.passman/audit_logs")


class EventType(str, Enum):
    """Types of vault events that can be logged."""
    VAULT_LOADED = "vault.loaded"
    VAULT_SAVED = "vault.saved"
    VAULT_UNLOCK_FAILED = "vault.unlock.failed"
    ACCOUNT_ADDED = "vault.account.added"
    ACCOUNT_ACCESSED = "vault.account.accessed"
    ACCOUNT_UPDATED = "vault.account.updated"
    ACCOUNT_DELETED = "vault.account.deleted"
    VAULT_ERROR = "vault.error"


class EventSeverity(str, Enum):
    """
    Severity levels for vault events.

    - INFO: Normal activity
    - ALERT: Something the owner should notice (failed unlock)
    - CRITICAL: The vault could not be read or written
    """
    INFO = "info"
    ALERT = "alert"
    CRITICAL = "critical"


class AuditLogger:
    """
    Append-only audit logger for vault events.

    Features:
    - Structured JSON logging via structlog
    - Automatic timestamp and event ID
    - OS user / host context on every event
    """

    def __init__(self, log_dir: Optional[Path] = None, enabled: bool = True):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for audit logs (default: ~/.passman/audit_logs)
            enabled: When False, events are accepted but nothing is written
        """
        self.log_dir = Path(log_dir or DEFAULT_AUDIT_DIR).expanduser()
        self.enabled = enabled

        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )

        # One child logger per directory; instances never share a file handler
        dir_id = hashlib.sha256(str(self.log_dir).encode()).hexdigest()[:12]
        self.logger_name = f"{AUDIT_LOGGER_NAME}.{dir_id}"

        if self.enabled:
            self._setup_file_handler()

        self.logger = structlog.get_logger(self.logger_name)

    def _setup_file_handler(self):
        """Point this directory's audit logger at today's log file."""
        self.log_dir.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime("%Y-%m-%d")
        log_file = self.log_dir / f"audit_{today}.log"

        stdlib_logger = logging.getLogger(self.logger_name)
        for handler in list(stdlib_logger.handlers):
            stdlib_logger.removeHandler(handler)
            handler.close()

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))  # structlog handles formatting

        stdlib_logger.addHandler(file_handler)
        stdlib_logger.setLevel(logging.INFO)
        # Audit lines stay out of the console
        stdlib_logger.propagate = False

    def log_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Log a vault event (append-only).

        The UTC timestamp and the OS user/host context are added to every
        event.

        Args:
            event_type: Type of event (from EventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (never secrets)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())
        if not self.enabled:
            return event_id

        self.logger.info(
            "vault_event",
            event_id=event_id,
            event_type=event_type.value,
            severity=severity.value,
            message=message,
            details=details or {},
            user_context=self._get_default_user_context(),
        )

        return event_id

    def _get_default_user_context(self) -> Dict[str, Any]:
        """Get default user context (OS user, hostname, etc.)."""
        return {
            "os_user": os.getenv("USERNAME") or os.getenv("USER"),
            "hostname": socket.gethostname(),
            "platform": sys.platform,
        }


# Global logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Get global audit logger (singleton pattern)."""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger()
    return _audit_logger


def set_audit_logger(audit_logger: AuditLogger) -> None:
    """Replace the global audit logger (used by the CLI after loading settings)."""
    global _audit_logger
    _audit_logger = audit_logger
