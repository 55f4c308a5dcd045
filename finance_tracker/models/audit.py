"""
Audit Models for Finance Tracker

One event per sign-in attempt, recorded transaction, export and
persisted-state load. Events carry emails and ids, never passwords
or tokens.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Authentication
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    SESSION_INVALID = "session_invalid"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REJECTED = "transaction_rejected"

    # Reports
    REPORT_EXPORTED = "report_exported"

    # Persistence
    STATE_LOADED = "state_loaded"
    STATE_CORRUPT = "state_corrupt"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Random id, unique per event"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation time, timezone-aware UTC"
    )

    event_type: AuditEventType = Field(
        ...,
        description="What happened"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Maps to the structlog level"
    )

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'transaction', 'report')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="User id, transaction id or state key"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary for the log"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Event-specific fields (email, amount, format, ...)"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="True when a form or button caused it"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_json_line(self) -> str:
        """Serialize as one line of JSON for append-only sinks."""
        return json.dumps(self.to_log_dict(), default=str)


class AuditEventBuilder:
    """
    Factories for every event the app emits.

    Usage:
        event = AuditEventBuilder.login_failed(email)
        event = AuditEventBuilder.transaction_added(txn_id, "expense", "150.00")
    """

    @staticmethod
    def user_registered(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user_id,
            description=f"User registered: {email}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Registration rejected: email already registered",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(user_id: str, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="user",
            entity_id=user_id,
            description=f"User logged in: {email}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def login_failed(email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Login failed: no matching credentials",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def logout(user_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT,
            entity_type="user",
            entity_id=user_id,
            description="User logged out",
            is_user_action=True,
        )

    @staticmethod
    def session_invalid(reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_INVALID,
            severity=AuditSeverity.DEBUG,
            entity_type="session",
            description=f"Session rejected: {reason}",
            details={"reason": reason},
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
        category: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {transaction_type} {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            description=f"Transaction form rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def report_exported(
        report_format: str,
        filename: str,
        row_count: int,
        size_bytes: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            entity_type="report",
            description=f"Report exported: {filename}",
            details={
                "format": report_format,
                "filename": filename,
                "row_count": row_count,
                "size_bytes": size_bytes,
            },
            is_user_action=True,
        )

    @staticmethod
    def state_loaded(key: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            severity=AuditSeverity.DEBUG,
            entity_type="state",
            entity_id=key,
            description=f"Loaded {record_count} records from '{key}'",
            details={"record_count": record_count},
        )

    @staticmethod
    def state_corrupt(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_CORRUPT,
            severity=AuditSeverity.WARNING,
            entity_type="state",
            entity_id=key,
            description=f"Persisted '{key}' could not be parsed; treating as absent",
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
