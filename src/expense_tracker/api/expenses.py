"""Expense JSON API scoped to the signed-in user."""

from __future__ import annotations

from datetime import date as Date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from expense_tracker.api.context import require_api_user
from expense_tracker.api.models import (
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    SummaryResponse,
)
from expense_tracker.domain.expenses import ExpenseDraft, ExpenseFilters
from expense_tracker.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from expense_tracker.containers import AppContainer

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("")
async def list_expenses(
    request: Request,
    category: str | None = None,
    start: Date | None = None,
    end: Date | None = None,
    user: UserRecord = Depends(require_api_user),
) -> list[ExpenseResponse]:
    """Return the user's expenses, newest date first."""
    container: AppContainer = request.app.state.container
    expenses = container.expense_service.list_expenses(
        user, ExpenseFilters(category=category, start=start, end=end)
    )
    return [ExpenseResponse.from_record(expense) for expense in expenses]


@router.get("/summary")
async def summary(
    request: Request,
    category: str | None = None,
    start: Date | None = None,
    end: Date | None = None,
    user: UserRecord = Depends(require_api_user),
) -> SummaryResponse:
    """Return totals for the user's expenses."""
    container: AppContainer = request.app.state.container
    result = container.expense_service.summarize(
        user, ExpenseFilters(category=category, start=start, end=end)
    )
    return SummaryResponse.from_summary(result)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_expense(
    payload: ExpenseCreate,
    request: Request,
    user: UserRecord = Depends(require_api_user),
) -> ExpenseResponse:
    """Create an expense owned by the user."""
    container: AppContainer = request.app.state.container
    expense = container.expense_service.create_expense(
        user,
        ExpenseDraft(
            amount=payload.amount,
            category=payload.category,
            date=payload.date,
            description=payload.description,
        ),
    )
    return ExpenseResponse.from_record(expense)


@router.get("/{expense_id}")
async def get_expense(
    expense_id: UUID,
    request: Request,
    user: UserRecord = Depends(require_api_user),
) -> ExpenseResponse:
    container: AppContainer = request.app.state.container
    return ExpenseResponse.from_record(
        container.expense_service.get_expense(user, expense_id)
    )


@router.put("/{expense_id}")
async def update_expense(
    expense_id: UUID,
    payload: ExpenseUpdate,
    request: Request,
    user: UserRecord = Depends(require_api_user),
) -> ExpenseResponse:
    """Apply a partial update to one of the user's expenses."""
    container: AppContainer = request.app.state.container
    expense = container.expense_service.update_expense(
        user, expense_id, payload.changes()
    )
    return ExpenseResponse.from_record(expense)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: UUID,
    request: Request,
    user: UserRecord = Depends(require_api_user),
) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    container.expense_service.delete_expense(user, expense_id)
    return {"status": "deleted", "id": str(expense_id)}
