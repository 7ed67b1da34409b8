"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from expense_tracker.api.auth import router as auth_router
from expense_tracker.api.context import LoginRedirect, resolve_request_context
from expense_tracker.api.expenses import router as expenses_router
from expense_tracker.api.pages import STATIC_DIR
from expense_tracker.api.pages import router as pages_router
from expense_tracker.app_logging import configure_logging
from expense_tracker.containers import AppContainer
from expense_tracker.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.check_connection()
        try:
            app.state.container.session_service.purge_expired()
        except Exception:
            logger.exception("Failed to purge expired sessions")
        yield

    app = FastAPI(title="Expense Tracker", lifespan=lifespan)
    app.state.container = container

    @app.middleware("http")
    async def attach_request_context(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Resolve the session cookie into a RequestContext for every request.

        The Supabase client is synchronous, so the lookup runs in the threadpool.
        """
        state_container: AppContainer = request.app.state.container
        request.state.context = await run_in_threadpool(
            resolve_request_context,
            state_container,
            request.cookies.get(state_container.settings.session_cookie_name),
        )
        return await call_next(request)

    _register_error_handlers(app)

    app.include_router(pages_router)
    app.include_router(auth_router)
    app.include_router(expenses_router)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(LoginRedirect)
    async def login_redirect(_request: Request, _exc: LoginRedirect) -> Response:
        return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)

    @app.exception_handler(AuthenticationError)
    async def authentication_failed(
        _request: Request, exc: AuthenticationError
    ) -> Response:
        return JSONResponse(
            {"detail": str(exc)}, status_code=status.HTTP_401_UNAUTHORIZED
        )

    @app.exception_handler(AuthorizationError)
    async def authorization_failed(
        _request: Request, exc: AuthorizationError
    ) -> Response:
        return JSONResponse(
            {"detail": str(exc)}, status_code=status.HTTP_401_UNAUTHORIZED
        )

    @app.exception_handler(NotFoundError)
    async def not_found(_request: Request, exc: NotFoundError) -> Response:
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(ConflictError)
    async def conflict(_request: Request, exc: ConflictError) -> Response:
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_409_CONFLICT)

    @app.exception_handler(ValidationError)
    async def invalid_fields(_request: Request, exc: ValidationError) -> Response:
        return _validation_response(exc.errors)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        _request: Request, exc: RequestValidationError
    ) -> Response:
        return _validation_response(_field_errors(exc))


def _validation_response(errors: dict[str, str]) -> JSONResponse:
    return JSONResponse(
        {"detail": "Validation failed", "errors": errors},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def _field_errors(exc: RequestValidationError) -> dict[str, str]:
    """Map pydantic errors to ``{field: message}``, dropping the location prefix."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())]
        if location and location[0] in {"body", "query", "path"}:
            location = location[1:]
        field = ".".join(location) or "body"
        errors.setdefault(field, _clean_message(str(error.get("msg", "Invalid value"))))
    return errors


def _clean_message(message: str) -> str:
    return message.removeprefix("Value error, ")
