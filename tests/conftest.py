"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from expense_tracker.api.app import create_app
from expense_tracker.config import Settings
from expense_tracker.containers import AppContainer
from expense_tracker.domain.expenses import ExpenseDraft, ExpenseFilters, ExpenseRecord
from expense_tracker.domain.models import UserRecord
from expense_tracker.domain.sessions import SessionRecord
from expense_tracker.services.expenses import ExpenseRepository, ExpenseService
from expense_tracker.services.sessions import SessionRepository, SessionService
from expense_tracker.services.users import UserRepository, UserService

TEST_PASSWORD = "correct-horse"


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    def create_user(
        self, email: str, name: str | None, password_hash: str
    ) -> UserRecord:
        user = UserRecord(
            id=uuid4(),
            email=email,
            name=name,
            password_hash=password_hash,
            created_at=datetime.now(tz=UTC),
        )
        self.users[user.id] = user
        return user


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session store for tests."""

    sessions: dict[str, SessionRecord] = field(default_factory=dict)

    def create_session(
        self, session_id: str, user_id: UUID, expires_at: datetime
    ) -> SessionRecord:
        session = SessionRecord(id=session_id, user_id=user_id, expires_at=expires_at)
        self.sessions[session_id] = session
        return session

    def get_session(self, session_id: str) -> SessionRecord | None:
        return self.sessions.get(session_id)

    def delete_session(self, session_id: str) -> None:
        self.sessions.pop(session_id, None)

    def delete_expired(self, now: datetime) -> int:
        expired = [
            session_id
            for session_id, session in self.sessions.items()
            if session.is_expired(now)
        ]
        for session_id in expired:
            del self.sessions[session_id]
        return len(expired)


@dataclass
class InMemoryExpenseRepository(ExpenseRepository):
    """In-memory expense repository for tests."""

    expenses: dict[UUID, ExpenseRecord] = field(default_factory=dict)

    def list_expenses(
        self, user_id: UUID, filters: ExpenseFilters
    ) -> list[ExpenseRecord]:
        return [
            expense
            for expense in self.expenses.values()
            if expense.user_id == user_id
            and (filters.category is None or expense.category == filters.category)
            and (filters.start is None or expense.date >= filters.start)
            and (filters.end is None or expense.date <= filters.end)
        ]

    def get_expense(self, user_id: UUID, expense_id: UUID) -> ExpenseRecord | None:
        expense = self.expenses.get(expense_id)
        if expense is None or expense.user_id != user_id:
            return None
        return expense

    def create_expense(self, user_id: UUID, draft: ExpenseDraft) -> ExpenseRecord:
        expense = ExpenseRecord(
            id=uuid4(),
            user_id=user_id,
            amount=draft.amount,
            category=draft.category,
            date=draft.date,
            description=draft.description,
            created_at=datetime.now(tz=UTC),
        )
        self.expenses[expense.id] = expense
        return expense

    def update_expense(
        self, user_id: UUID, expense_id: UUID, changes: dict[str, object]
    ) -> ExpenseRecord | None:
        current = self.get_expense(user_id, expense_id)
        if current is None:
            return None
        updated = replace(current, **changes)
        self.expenses[expense_id] = updated
        return updated

    def delete_expense(self, user_id: UUID, expense_id: UUID) -> bool:
        if self.get_expense(user_id, expense_id) is None:
            return False
        del self.expenses[expense_id]
        return True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        session_secret="test-secret",
        environment="test",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def expense_repository() -> InMemoryExpenseRepository:
    return InMemoryExpenseRepository()


@pytest.fixture
def container(
    settings: Settings,
    user_repository: InMemoryUserRepository,
    session_repository: InMemorySessionRepository,
    expense_repository: InMemoryExpenseRepository,
) -> AppContainer:
    def check_connection() -> None:
        return None

    return AppContainer(
        settings=settings,
        user_service=UserService(user_repository),
        session_service=SessionService(
            repository=session_repository,
            secret=settings.session_secret,
            ttl_seconds=settings.session_ttl_seconds,
        ),
        expense_service=ExpenseService(expense_repository),
        check_connection=check_connection,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def register_and_login(
    client: TestClient, email: str, password: str = TEST_PASSWORD
) -> dict[str, object]:
    """Register a user through the API, log in, and return the user payload."""
    response = client.post("/register", json={"email": email, "password": password})
    assert response.status_code == 201
    response = client.post("/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["user"]
