# Core Module - Shared Utilities
#
# Core module provides functionality shared by the vault and the CLI:
# - Audit logging
# - Configuration

from .audit_log import (
    AuditLogger,
    EventSeverity,
    EventType,
    get_audit_logger,
    set_audit_logger,
)
from .config import Settings, load_settings

__all__ = [
    # Audit Logging
    "AuditLogger",
    "EventType",
    "EventSeverity",
    "get_audit_logger",
    "set_audit_logger",
    # Configuration
    "Settings",
    "load_settings",
]
