"""Per-request identity and the guards that depend on it.

Request handling runs in a fixed order: the HTTP middleware in ``app.py``
calls :func:`resolve_request_context` and stores the result on
``request.state.context``; route dependencies then either return the
current user or short-circuit by raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Depends, Request

from expense_tracker.domain.errors import AuthorizationError
from expense_tracker.domain.models import UserRecord  # noqa: TC001

if TYPE_CHECKING:
    from expense_tracker.containers import AppContainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Identity attached to a single request."""

    session_id: str | None = None
    current_user: UserRecord | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None


class LoginRedirect(Exception):
    """Raised by the page guard; handled by redirecting to the login page."""


def resolve_request_context(
    container: AppContainer, cookie_value: str | None
) -> RequestContext:
    """Resolve the session cookie to a user. Never raises."""
    if not cookie_value:
        return RequestContext()
    try:
        session = container.session_service.resolve(cookie_value)
        if session is None:
            return RequestContext()
        user = container.user_service.get_user(session.user_id)
    except Exception:
        logger.exception("Failed to resolve session")
        return RequestContext()
    return RequestContext(session_id=session.id, current_user=user)


def get_request_context(request: Request) -> RequestContext:
    """Return the context attached by the middleware."""
    return getattr(request.state, "context", None) or RequestContext()


async def current_user(
    context: RequestContext = Depends(get_request_context),
) -> UserRecord | None:
    """Return the current user, or None for anonymous requests."""
    return context.current_user


async def require_page_user(
    user: UserRecord | None = Depends(current_user),
) -> UserRecord:
    """Guard for HTML pages: anonymous requests are sent to the login page."""
    if user is None:
        raise LoginRedirect()
    return user


async def require_api_user(
    user: UserRecord | None = Depends(current_user),
) -> UserRecord:
    """Guard for the JSON API: anonymous requests get 401."""
    if user is None:
        raise AuthorizationError()
    return user
