"""Domain models for expense records."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class ExpenseRecord:
    """Expense row owned by a single user."""

    id: UUID
    user_id: UUID
    amount: float
    category: str
    date: date
    description: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ExpenseDraft:
    """Validated fields for a new expense."""

    amount: float
    category: str
    date: date
    description: str = ""


@dataclass(frozen=True)
class ExpenseFilters:
    """Optional list filters. Date bounds are inclusive."""

    category: str | None = None
    start: date | None = None
    end: date | None = None


@dataclass(frozen=True)
class ExpenseSummary:
    """Aggregated spend for a user."""

    count: int
    total: float
    by_category: dict[str, float] = field(default_factory=dict)
