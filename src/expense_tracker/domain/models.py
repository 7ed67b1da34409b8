"""Domain models for the expense tracker."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UserRecord:
    """Represents a user stored in the database."""

    id: UUID
    email: str
    name: str | None
    password_hash: str
    created_at: datetime | None = None

    def public_view(self) -> dict[str, object]:
        """Return the user fields that are safe to expose to clients."""
        return {"id": str(self.id), "email": self.email, "name": self.name}
