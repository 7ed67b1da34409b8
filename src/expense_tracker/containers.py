"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass

from supabase import Client, create_client

from expense_tracker.adapters.supabase_expense_repository import (
    SupabaseExpenseRepository,
)
from expense_tracker.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from expense_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from expense_tracker.config import Settings, load_settings
from expense_tracker.domain.errors import DatabaseConnectionError
from expense_tracker.services.expenses import ExpenseService
from expense_tracker.services.sessions import SessionService
from expense_tracker.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    session_service: SessionService
    expense_service: ExpenseService
    check_connection: Callable[[], None]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or load_settings()
    try:
        supabase_client = create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_service_key
        )
    except Exception as exc:
        raise DatabaseConnectionError(
            f"Invalid Supabase client settings: {exc}"
        ) from exc

    def check_connection() -> None:
        _ping(supabase_client)

    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(SupabaseUserRepository(supabase_client)),
        session_service=SessionService(
            repository=SupabaseSessionRepository(supabase_client),
            secret=resolved_settings.session_secret,
            ttl_seconds=resolved_settings.session_ttl_seconds,
        ),
        expense_service=ExpenseService(SupabaseExpenseRepository(supabase_client)),
        check_connection=check_connection,
    )


def _ping(client: Client) -> None:
    try:
        client.table("users").select("id").limit(1).execute()
    except Exception as exc:
        raise DatabaseConnectionError(f"Database connection failed: {exc}") from exc
