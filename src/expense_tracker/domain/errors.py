"""Error types raised by the expense tracker."""


class ExpenseTrackerError(Exception):
    """Base class for application errors."""


class ConfigurationError(ExpenseTrackerError):
    """Required configuration is missing or invalid."""


class DatabaseConnectionError(ExpenseTrackerError):
    """The database could not be reached at startup."""


class AuthenticationError(ExpenseTrackerError):
    """Credentials were rejected."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class AuthorizationError(ExpenseTrackerError):
    """The request carries no authenticated identity."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ValidationError(ExpenseTrackerError):
    """Input failed validation; ``errors`` maps field names to messages."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("Validation failed")
        self.errors = errors


class NotFoundError(ExpenseTrackerError):
    """The record does not exist or is not owned by the caller."""


class ConflictError(ExpenseTrackerError):
    """A record with the same identifying fields already exists."""
