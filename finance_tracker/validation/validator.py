"""
New-Transaction Form Validation

DESIGN DECISION: Raw form input is checked here before it reaches the
store. The form sends strings, so this layer owns the conversion:
- amount text -> Decimal (positive, optionally capped in decimal places)
- description -> stripped, non-empty text
- category -> ExpenseCategory, required only for expenses

Issues are reported as short user-facing messages. Nothing is silently
corrected except that a category submitted with an income is dropped,
because the income form never shows one.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from finance_tracker.models.transaction import (
    ExpenseCategory,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


MAX_DESCRIPTION_LENGTH = 500


class TransactionFormValidator:
    """
    Validates and cleans the fields of the new-transaction form.

    Args:
        max_decimal_places: Reject amounts with more fractional digits.
                            None accepts any precision.
    """

    def __init__(self, max_decimal_places: Optional[int] = None):
        self._max_decimal_places = max_decimal_places

    def _parse_amount(
        self,
        amount_text: Union[str, Decimal, int, float, None],
    ) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
        if amount_text is None or (isinstance(amount_text, str) and not amount_text.strip()):
            return None, ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an amount",
            )

        text = str(amount_text).strip()
        # Accept a decimal comma ("12,50") as typed in the form placeholder
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"'{amount_text}' is not a valid amount",
            )

        if not amount.is_finite():
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"'{amount_text}' is not a valid amount",
            )
        if amount <= 0:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            )
        places = self._max_decimal_places
        if places is not None and amount.as_tuple().exponent < -places:
            return None, ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=f"Amount can have at most {places} decimal places",
            )
        return amount, None

    def validate(
        self,
        transaction_type: Union[TransactionType, str],
        amount_text: Union[str, Decimal, int, float, None],
        description: Optional[str],
        category: Union[ExpenseCategory, str, None] = None,
    ) -> ValidationResult:
        """
        Validate one submission of the form.

        Returns:
            ValidationResult with cleaned values when valid
        """
        issues = []

        try:
            kind = TransactionType(transaction_type)
        except ValueError:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message="Choose income or expense",
            ))
            kind = None

        amount, amount_issue = self._parse_amount(amount_text)
        if amount_issue:
            issues.append(amount_issue)

        cleaned_description = (description or "").strip()
        if not cleaned_description:
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Please enter a description",
            ))
        elif len(cleaned_description) > MAX_DESCRIPTION_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="invalid_value",
                message=f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
            ))

        cleaned_category = None
        if kind == TransactionType.EXPENSE:
            if category is None or category == "":
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="missing",
                    message="Please select a category",
                ))
            else:
                try:
                    cleaned_category = ExpenseCategory(category)
                except ValueError:
                    issues.append(ValidationIssue(
                        field="category",
                        issue_type="invalid_value",
                        message=f"Unknown category: {category}",
                    ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return ValidationResult(
            is_valid=is_valid,
            issues=issues,
            type=kind,
            amount=amount,
            description=cleaned_description or None,
            category=cleaned_category,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short inline message for the form."""
        if result.is_valid:
            return "Transaction added."
        return "\n".join(f"• {issue.message}" for issue in result.issues)
