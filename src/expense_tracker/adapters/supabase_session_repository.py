"""Supabase-backed session store."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from expense_tracker.domain.sessions import SessionRecord
from expense_tracker.services.sessions import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for login sessions."""

    client: Client

    def create_session(
        self, session_id: str, user_id: UUID, expires_at: datetime
    ) -> SessionRecord:
        """Create a session row and return it."""
        response = (
            self.client.table("sessions")
            .insert(
                {
                    "id": session_id,
                    "user_id": str(user_id),
                    "expires_at": expires_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _parse_row(response.data[0])

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("sessions")
            .select("id, user_id, expires_at")
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_session(self, session_id: str) -> None:
        """Delete a session row."""
        self.client.table("sessions").delete().eq("id", session_id).execute()

    def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose expiry has passed."""
        response = (
            self.client.table("sessions")
            .delete()
            .lte("expires_at", now.isoformat())
            .execute()
        )
        return len(response.data or [])


def _parse_row(row: dict[str, object]) -> SessionRecord:
    return SessionRecord(
        id=str(row["id"]),
        user_id=UUID(str(row["user_id"])),
        expires_at=datetime.fromisoformat(str(row["expires_at"])),
    )
