"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client, PostgrestAPIError

from expense_tracker.domain.errors import ConflictError
from expense_tracker.domain.models import UserRecord
from expense_tracker.services.users import UserRepository

_COLUMNS = "id, email, name, password_hash, created_at"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for an email, if present."""
        response = (
            self.client.table("users")
            .select(_COLUMNS)
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def create_user(
        self, email: str, name: str | None, password_hash: str
    ) -> UserRecord:
        """Create a new user row and return it."""
        try:
            response = (
                self.client.table("users")
                .insert({"email": email, "name": name, "password_hash": password_hash})
                .execute()
            )
        except PostgrestAPIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise ConflictError(
                    "An account with this email already exists"
                ) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> UserRecord:
    created_at = row.get("created_at")
    return UserRecord(
        id=UUID(str(row["id"])),
        email=str(row["email"]),
        name=row.get("name"),
        password_hash=str(row["password_hash"]),
        created_at=(
            datetime.fromisoformat(created_at)
            if isinstance(created_at, str) and created_at
            else None
        ),
    )
