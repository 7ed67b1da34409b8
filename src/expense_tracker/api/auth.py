"""Login, logout and registration endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse

from expense_tracker.api.context import RequestContext, get_request_context
from expense_tracker.api.models import LoginRequest, RegisterRequest
from expense_tracker.api.pages import page

if TYPE_CHECKING:
    from expense_tracker.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

DASHBOARD_PATH = "/expenses/dashboard"


@router.get("/login", include_in_schema=False)
async def login_page() -> FileResponse:
    return page("login.html")


@router.post("/login")
async def login(
    payload: LoginRequest,
    request: Request,
    context: RequestContext = Depends(get_request_context),
) -> JSONResponse:
    """Check credentials and start a new session."""
    container: AppContainer = request.app.state.container
    user = container.user_service.authenticate(payload.email, payload.password)

    cookie_name = container.settings.session_cookie_name
    if context.session_id is not None:
        container.session_service.end(request.cookies.get(cookie_name))
    issued = container.session_service.start(user.id)
    logger.info("User logged in", extra={"user_id": str(user.id)})

    response = JSONResponse(
        {"status": "ok", "user": user.public_view(), "redirect": DASHBOARD_PATH}
    )
    response.set_cookie(
        cookie_name,
        issued.cookie_value,
        max_age=container.session_service.ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=container.settings.secure_cookies,
    )
    return response


@router.get("/logout", include_in_schema=False)
async def logout_page(request: Request) -> RedirectResponse:
    """Destroy the session and return to the login page."""
    response = RedirectResponse("/login", status_code=status.HTTP_302_FOUND)
    _end_session(request, response)
    return response


@router.post("/logout")
async def logout(request: Request) -> JSONResponse:
    """Destroy the session. Calling it without a session is not an error."""
    response = JSONResponse({"status": "ok"})
    _end_session(request, response)
    return response


@router.get("/register", include_in_schema=False)
async def register_page() -> FileResponse:
    return page("register.html")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, request: Request) -> dict[str, object]:
    """Create an account. The new user still has to log in."""
    container: AppContainer = request.app.state.container
    user = container.user_service.register(
        email=payload.email, password=payload.password, name=payload.name
    )
    return {"status": "created", "user": user.public_view()}


def _end_session(request: Request, response: Response) -> None:
    container: AppContainer = request.app.state.container
    cookie_name = container.settings.session_cookie_name
    container.session_service.end(request.cookies.get(cookie_name))
    response.delete_cookie(
        cookie_name,
        httponly=True,
        samesite="lax",
        secure=container.settings.secure_cookies,
    )
