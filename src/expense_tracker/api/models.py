"""Pydantic models for request and response bodies."""

from datetime import date as Date
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from expense_tracker.domain.expenses import ExpenseRecord, ExpenseSummary


class LoginRequest(BaseModel):
    """Login credentials."""

    email: str
    password: str


class RegisterRequest(BaseModel):
    """Registration payload."""

    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=6, max_length=128)
    name: str | None = Field(default=None, max_length=100)


class ExpenseCreate(BaseModel):
    """New expense payload."""

    amount: float = Field(ge=0, allow_inf_nan=False)
    category: str
    date: Date
    description: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def amount_not_bool(cls, value: object) -> object:
        return _reject_bool(value)

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Category is required")
        return value.strip()


class ExpenseUpdate(BaseModel):
    """Partial expense update. Omitted fields are left unchanged."""

    amount: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    category: str | None = None
    date: Date | None = None
    description: str | None = None

    @field_validator("amount", mode="before")
    @classmethod
    def amount_not_bool(cls, value: object) -> object:
        return _reject_bool(value)

    @field_validator("amount", "category", "date")
    @classmethod
    def reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field may not be null")
        return value

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Category is required")
        return value.strip()

    def changes(self) -> dict[str, object]:
        """Return only the fields the client sent."""
        return self.model_dump(exclude_unset=True)


def _reject_bool(value: object) -> object:
    # JSON true/false would otherwise coerce to 1.0/0.0.
    if isinstance(value, bool):
        raise ValueError("Amount must be a number")
    return value


class ExpenseResponse(BaseModel):
    """Expense as returned by the API."""

    id: UUID
    user_id: UUID
    amount: float
    category: str
    date: Date
    description: str
    created_at: datetime | None = None

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            amount=record.amount,
            category=record.category,
            date=record.date,
            description=record.description,
            created_at=record.created_at,
        )


class SummaryResponse(BaseModel):
    """Aggregated spend for the current user."""

    count: int
    total: float
    by_category: dict[str, float]

    @classmethod
    def from_summary(cls, summary: ExpenseSummary) -> "SummaryResponse":
        return cls(
            count=summary.count,
            total=summary.total,
            by_category=summary.by_category,
        )
