"""
Audit Logger

Sign-ins, new transactions, exports and problems with persisted state all
leave a trace here, so a surprising balance or a vanished session can be
explained after the fact.

- Synchronous, like the rest of the app
- A failing sink never breaks the action being audited
- Emails and ids only; passwords and tokens are never passed in
"""

from typing import Optional

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finance_tracker.services.storage import AuditStorageInterface


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

_LEVELS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
}


class AuditLogger:
    """
    Writes every audit event to the structured log and, when a sink is
    configured, appends it there too (audit.jsonl or an in-memory deque).
    """

    def __init__(self, storage: Optional[AuditStorageInterface] = None):
        self._storage = storage
        self._logger = structlog.get_logger("finance_tracker.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Record one event.

        Returns False only when the sink rejected it; the structured log
        line is written regardless.
        """
        emit = getattr(self._logger, _LEVELS[event.severity])
        emit("audit_event", **event.to_log_dict())

        if self._storage is None:
            return True
        try:
            return self._storage.append_event(event)
        except Exception as e:
            self._logger.error(
                "audit_sink_failed",
                event_id=str(event.event_id),
                event_type=event.event_type.value,
                error=str(e),
            )
            return False

    def log_user_registered(self, user_id: str, email: str) -> None:
        self.log(AuditEventBuilder.user_registered(user_id=user_id, email=email))

    def log_registration_rejected(self, email: str) -> None:
        self.log(AuditEventBuilder.registration_rejected(email=email))

    def log_login_succeeded(self, user_id: str, email: str) -> None:
        self.log(AuditEventBuilder.login_succeeded(user_id=user_id, email=email))

    def log_login_failed(self, email: str) -> None:
        self.log(AuditEventBuilder.login_failed(email=email))

    def log_logout(self, user_id: Optional[str]) -> None:
        self.log(AuditEventBuilder.logout(user_id=user_id))

    def log_session_invalid(self, reason: str) -> None:
        self.log(AuditEventBuilder.session_invalid(reason=reason))

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
        category: Optional[str] = None,
    ) -> None:
        """Log a newly recorded transaction."""
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            category=category,
        ))

    def log_transaction_rejected(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.transaction_rejected(issues=issues))

    def log_report_exported(
        self,
        report_format: str,
        filename: str,
        row_count: int,
        size_bytes: int,
    ) -> None:
        """Log a generated export."""
        self.log(AuditEventBuilder.report_exported(
            report_format=report_format,
            filename=filename,
            row_count=row_count,
            size_bytes=size_bytes,
        ))

    def log_state_loaded(self, key: str, record_count: int) -> None:
        self.log(AuditEventBuilder.state_loaded(key=key, record_count=record_count))

    def log_state_corrupt(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.state_corrupt(key=key, error_message=error_message))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
