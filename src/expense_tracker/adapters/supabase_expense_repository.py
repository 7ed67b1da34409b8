"""Supabase repository for expenses."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from expense_tracker.domain.expenses import ExpenseDraft, ExpenseFilters, ExpenseRecord
from expense_tracker.services.expenses import ExpenseRepository

_COLUMNS = "id, user_id, amount, category, date, description, created_at"


@dataclass
class SupabaseExpenseRepository(ExpenseRepository):
    """Supabase implementation for expenses.

    Every query is filtered on ``user_id`` so a row owned by someone else
    behaves exactly like a missing row.
    """

    client: Client

    def list_expenses(
        self, user_id: UUID, filters: ExpenseFilters
    ) -> list[ExpenseRecord]:
        """Return the owner's expenses, newest first."""
        query = (
            self.client.table("expenses").select(_COLUMNS).eq("user_id", str(user_id))
        )
        if filters.category:
            query = query.eq("category", filters.category)
        if filters.start:
            query = query.gte("date", filters.start.isoformat())
        if filters.end:
            query = query.lte("date", filters.end.isoformat())
        response = (
            query.order("date", desc=True).order("created_at", desc=True).execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_expense(self, user_id: UUID, expense_id: UUID) -> ExpenseRecord | None:
        """Return one owned expense."""
        response = (
            self.client.table("expenses")
            .select(_COLUMNS)
            .eq("id", str(expense_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def create_expense(self, user_id: UUID, draft: ExpenseDraft) -> ExpenseRecord:
        """Insert an expense row and return it."""
        response = (
            self.client.table("expenses")
            .insert(
                {
                    "user_id": str(user_id),
                    "amount": draft.amount,
                    "category": draft.category,
                    "date": draft.date.isoformat(),
                    "description": draft.description,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create expense")
        return _parse_row(response.data[0])

    def update_expense(
        self, user_id: UUID, expense_id: UUID, changes: dict[str, object]
    ) -> ExpenseRecord | None:
        """Update an owned expense row."""
        payload = {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in changes.items()
        }
        response = (
            self.client.table("expenses")
            .update(payload)
            .eq("id", str(expense_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_expense(self, user_id: UUID, expense_id: UUID) -> bool:
        """Delete an owned expense row."""
        response = (
            self.client.table("expenses")
            .delete()
            .eq("id", str(expense_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> ExpenseRecord:
    created_at = row.get("created_at")
    return ExpenseRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        amount=float(row.get("amount", 0.0)),
        category=str(row.get("category", "")),
        date=date.fromisoformat(str(row["date"])),
        description=str(row.get("description") or ""),
        created_at=(
            datetime.fromisoformat(created_at)
            if isinstance(created_at, str) and created_at
            else None
        ),
    )
