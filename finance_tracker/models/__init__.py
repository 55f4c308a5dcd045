"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
All data flowing through the system must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    CategoryTotal,
    ExpenseCategory,
    FinancialSummary,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    utcnow,
)
from finance_tracker.models.user import (
    PublicUser,
    SessionPayload,
    User,
)
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "CategoryTotal",
    "ExpenseCategory",
    "FinancialSummary",
    "Transaction",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "utcnow",
    # User models
    "PublicUser",
    "SessionPayload",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
