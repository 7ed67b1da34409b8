"""Expense CRUD scoped to the requesting user."""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from expense_tracker.domain.errors import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from expense_tracker.domain.expenses import (
    ExpenseDraft,
    ExpenseFilters,
    ExpenseRecord,
    ExpenseSummary,
)
from expense_tracker.domain.models import UserRecord

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("amount", "category", "date", "description")
_NO_TIMESTAMP = datetime.min.replace(tzinfo=UTC)


class ExpenseRepository(Protocol):
    """Persistence interface for expenses.

    Every method takes the owner id and must only touch rows owned by it.
    """

    def list_expenses(
        self, user_id: UUID, filters: ExpenseFilters
    ) -> list[ExpenseRecord]:
        """Return the owner's expenses, newest date first."""

    def get_expense(self, user_id: UUID, expense_id: UUID) -> ExpenseRecord | None:
        """Return one owned expense."""

    def create_expense(self, user_id: UUID, draft: ExpenseDraft) -> ExpenseRecord:
        """Persist a new expense and return it."""

    def update_expense(
        self, user_id: UUID, expense_id: UUID, changes: dict[str, object]
    ) -> ExpenseRecord | None:
        """Apply changes to an owned expense; None when nothing matched."""

    def delete_expense(self, user_id: UUID, expense_id: UUID) -> bool:
        """Delete an owned expense; False when nothing matched."""


@dataclass
class ExpenseService:
    """Application service for a user's expenses."""

    repository: ExpenseRepository

    def list_expenses(
        self, user: UserRecord | None, filters: ExpenseFilters | None = None
    ) -> list[ExpenseRecord]:
        """Return the user's expenses ordered by date, newest first."""
        owner_id = _require_owner(user)
        expenses = self.repository.list_expenses(owner_id, filters or ExpenseFilters())
        return sort_expenses(expenses)

    def get_expense(self, user: UserRecord | None, expense_id: UUID) -> ExpenseRecord:
        owner_id = _require_owner(user)
        expense = self.repository.get_expense(owner_id, expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        return expense

    def create_expense(
        self, user: UserRecord | None, draft: ExpenseDraft
    ) -> ExpenseRecord:
        """Validate and persist an expense owned by the user."""
        owner_id = _require_owner(user)
        fields = validate_expense_fields(
            {
                "amount": draft.amount,
                "category": draft.category,
                "date": draft.date,
                "description": draft.description,
            }
        )
        expense = self.repository.create_expense(owner_id, ExpenseDraft(**fields))
        logger.info(
            "Created expense",
            extra={"user_id": str(owner_id), "expense_id": str(expense.id)},
        )
        return expense

    def update_expense(
        self, user: UserRecord | None, expense_id: UUID, changes: dict[str, object]
    ) -> ExpenseRecord:
        """Apply a partial update to an owned expense."""
        owner_id = _require_owner(user)
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError({name: "Unknown field" for name in unknown})
        fields = validate_expense_fields(changes)
        if not fields:
            return self.get_expense(user, expense_id)
        updated = self.repository.update_expense(owner_id, expense_id, fields)
        if updated is None:
            raise NotFoundError("Expense not found")
        return updated

    def delete_expense(self, user: UserRecord | None, expense_id: UUID) -> None:
        owner_id = _require_owner(user)
        if not self.repository.delete_expense(owner_id, expense_id):
            raise NotFoundError("Expense not found")
        logger.info(
            "Deleted expense",
            extra={"user_id": str(owner_id), "expense_id": str(expense_id)},
        )

    def summarize(
        self, user: UserRecord | None, filters: ExpenseFilters | None = None
    ) -> ExpenseSummary:
        """Return the count, total and per-category totals of the user's spend."""
        expenses = self.list_expenses(user, filters)
        by_category: dict[str, float] = defaultdict(float)
        for expense in expenses:
            by_category[expense.category] += expense.amount
        return ExpenseSummary(
            count=len(expenses),
            total=round(sum(by_category.values()), 2),
            by_category={
                category: round(total, 2)
                for category, total in sorted(by_category.items())
            },
        )


def validate_expense_fields(fields: dict[str, object]) -> dict[str, object]:
    """Check the provided expense fields and return them normalized.

    Only keys present in ``fields`` are checked, so the same rules serve
    both creation and partial updates.
    """
    errors: dict[str, str] = {}
    cleaned: dict[str, object] = {}
    if "amount" in fields:
        amount = fields["amount"]
        if isinstance(amount, bool) or not isinstance(amount, int | float):
            errors["amount"] = "Amount must be a number"
        elif not math.isfinite(amount) or amount < 0:
            errors["amount"] = "Amount must be a non-negative number"
        else:
            cleaned["amount"] = float(amount)
    if "category" in fields:
        category = fields["category"]
        if not isinstance(category, str) or not category.strip():
            errors["category"] = "Category is required"
        else:
            cleaned["category"] = category.strip()
    if "date" in fields:
        value = fields["date"]
        if not isinstance(value, date):
            errors["date"] = "Date must be a valid date"
        else:
            cleaned["date"] = value
    if "description" in fields:
        description = fields["description"]
        if description is None:
            cleaned["description"] = ""
        elif not isinstance(description, str):
            errors["description"] = "Description must be text"
        else:
            cleaned["description"] = description.strip()
    if errors:
        raise ValidationError(errors)
    return cleaned


def sort_expenses(expenses: list[ExpenseRecord]) -> list[ExpenseRecord]:
    """Order by date descending, then by creation time descending."""
    return sorted(
        expenses,
        key=lambda expense: (expense.date, expense.created_at or _NO_TIMESTAMP),
        reverse=True,
    )


def _require_owner(user: UserRecord | None) -> UUID:
    if user is None:
        raise AuthorizationError()
    return user.id
