"""Server-side login sessions backed by the shared sessions table."""

import base64
import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID

from expense_tracker.domain.sessions import IssuedSession, SessionRecord

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60 * 24


class SessionRepository(Protocol):
    """Persistence interface for login sessions."""

    def create_session(
        self, session_id: str, user_id: UUID, expires_at: datetime
    ) -> SessionRecord:
        """Create a new session and return it."""

    def get_session(self, session_id: str) -> SessionRecord | None:
        """Return a session by id, if present."""

    def delete_session(self, session_id: str) -> None:
        """Delete a session. Deleting a missing session is a no-op."""

    def delete_expired(self, now: datetime) -> int:
        """Delete sessions that expired before ``now`` and return the count."""


@dataclass
class SessionService:
    """Issues, resolves and destroys signed session cookies."""

    repository: SessionRepository
    secret: str
    ttl_seconds: int = DEFAULT_TTL_SECONDS

    def start(self, user_id: UUID) -> IssuedSession:
        """Create a session for the user and return its signed cookie value."""
        session_id = secrets.token_urlsafe(32)
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=self.ttl_seconds)
        record = self.repository.create_session(session_id, user_id, expires_at)
        return IssuedSession(record=record, cookie_value=self.sign(session_id))

    def resolve(self, cookie_value: str | None) -> SessionRecord | None:
        """Return the live session named by a cookie, or None.

        Cookies with a bad signature are ignored. Expired sessions are
        destroyed on sight.
        """
        session_id = self.unsign(cookie_value)
        if session_id is None:
            return None
        record = self.repository.get_session(session_id)
        if record is None:
            return None
        if record.is_expired(datetime.now(tz=UTC)):
            self.repository.delete_session(session_id)
            return None
        return record

    def end(self, cookie_value: str | None) -> None:
        """Destroy the session named by a cookie, if any."""
        session_id = self.unsign(cookie_value)
        if session_id is not None:
            self.repository.delete_session(session_id)

    def purge_expired(self) -> int:
        """Delete every expired session."""
        removed = self.repository.delete_expired(datetime.now(tz=UTC))
        if removed:
            logger.info("Purged expired sessions", extra={"count": removed})
        return removed

    def sign(self, session_id: str) -> str:
        """Return the cookie value for a session id."""
        return f"{session_id}.{self._signature(session_id)}"

    def unsign(self, cookie_value: str | None) -> str | None:
        """Return the session id from a signed cookie, or None if tampered."""
        if not cookie_value or "." not in cookie_value:
            return None
        session_id, signature = cookie_value.rsplit(".", maxsplit=1)
        if not session_id:
            return None
        if not hmac.compare_digest(signature, self._signature(session_id)):
            return None
        return session_id

    def _signature(self, session_id: str) -> str:
        digest = hmac.new(
            self.secret.encode(), session_id.encode(), hashlib.sha256
        ).digest()
        return base64.urlsafe_b64encode(digest).rstrip(b"=").decode()
