"""User registration and credential checks."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from werkzeug.security import check_password_hash, generate_password_hash

from expense_tracker.domain.errors import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from expense_tracker.domain.models import UserRecord

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserRepository(Protocol):
    """Persistence interface for user data."""

    def get_by_id(self, user_id: UUID) -> UserRecord | None:
        """Return the user with the given id, if present."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user for a normalized email, if present."""

    def create_user(
        self, email: str, name: str | None, password_hash: str
    ) -> UserRecord:
        """Create and return a new user record.

        Raises ConflictError when the email is already taken.
        """


@dataclass
class UserService:
    """Application service for user lifecycle actions."""

    repository: UserRepository

    def register(
        self, email: str, password: str, name: str | None = None
    ) -> UserRecord:
        """Create a user, rejecting duplicate emails."""
        normalized = normalize_email(email)
        errors: dict[str, str] = {}
        if not normalized or "@" not in normalized:
            errors["email"] = "A valid email address is required"
        if len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = (
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if errors:
            raise ValidationError(errors)
        if self.repository.get_by_email(normalized) is not None:
            raise ConflictError("An account with this email already exists")

        user = self.repository.create_user(
            email=normalized,
            name=name.strip() if name and name.strip() else None,
            password_hash=generate_password_hash(password),
        )
        logger.info("Registered user", extra={"user_id": str(user.id)})
        return user

    def authenticate(self, email: str, password: str) -> UserRecord:
        """Return the user for valid credentials or raise AuthenticationError."""
        user = self.repository.get_by_email(normalize_email(email))
        if user is None or not check_password_hash(user.password_hash, password):
            logger.info("Rejected login attempt")
            raise AuthenticationError()
        return user

    def get_user(self, user_id: UUID) -> UserRecord | None:
        """Return a user by id."""
        return self.repository.get_by_id(user_id)


def normalize_email(email: str) -> str:
    return email.strip().lower()
