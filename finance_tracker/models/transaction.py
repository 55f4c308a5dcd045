"""
Core Data Models for Finance Tracker

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce the income/expense invariants at construction time
2. Provide clear validation error messages
3. Be serializable for the persisted cookie copy and for logging

DESIGN DECISION: Transactions are frozen Pydantic models.
Once recorded they are never edited or deleted, so the type forbids it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"

    @property
    def label(self) -> str:
        return self.value.title()


class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: The set is fixed and ordered. Reports list every
    category in this order, including the ones with nothing spent.
    Income never carries a category.
    """
    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    BILLS = "bills"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.title()


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A single recorded income or expense event.

    CRITICAL: category is required for expenses and forbidden for income.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier derived from the creation timestamp"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount, currency-agnostic; rounded only for display"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Free text description"
    )
    category: Optional[ExpenseCategory] = Field(
        default=None,
        description="Expense category (expenses only)"
    )
    date: datetime = Field(
        default_factory=utcnow,
        description="When the transaction was recorded (UTC)"
    )

    @model_validator(mode='after')
    def validate_category(self) -> 'Transaction':
        """Category presence must match the transaction type."""
        if self.type == TransactionType.EXPENSE and self.category is None:
            raise ValueError("Expense transactions require a category")
        if self.type == TransactionType.INCOME and self.category is not None:
            raise ValueError("Income transactions cannot have a category")
        return self

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def signed_amount(self) -> Decimal:
        """+amount for income, -amount for expense."""
        return self.amount if self.is_income else -self.amount


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class CategoryTotal(BaseModel):
    """Total spent in one expense category."""

    category: ExpenseCategory
    total: Decimal = Field(default=Decimal("0"), ge=0)

    @property
    def label(self) -> str:
        return self.category.label


class FinancialSummary(BaseModel):
    """
    Aggregates derived from the full transaction list.

    Nothing here is stored. It is recomputed on every read.
    """

    total_income: Decimal = Field(default=Decimal("0"), ge=0)
    total_expense: Decimal = Field(default=Decimal("0"), ge=0)
    balance: Decimal = Field(
        default=Decimal("0"),
        description="total_income - total_expense"
    )
    by_category: list[CategoryTotal] = Field(
        default_factory=list,
        description="One entry per ExpenseCategory, in enum order"
    )
    transaction_count: int = Field(default=0, ge=0)
    low_balance: bool = Field(
        default=False,
        description="Balance is below the configured alert threshold"
    )

    def category_total(self, category: ExpenseCategory) -> Decimal:
        """Look up the total for a single category."""
        for entry in self.by_category:
            if entry.category == category:
                return entry.total
        return Decimal("0")


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in submitted form input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating the new-transaction form.

    When is_valid is True the cleaned values are ready to pass
    straight to TransactionStore.add().
    """

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    # Cleaned values (only meaningful when is_valid)
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    category: Optional[ExpenseCategory] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
