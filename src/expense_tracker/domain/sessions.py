"""Domain models for login sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted login session."""

    id: str
    user_id: UUID
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class IssuedSession:
    """A freshly created session and the signed cookie value that names it."""

    record: SessionRecord
    cookie_value: str
