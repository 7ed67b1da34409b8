"""Static HTML pages."""

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, RedirectResponse

from expense_tracker.api.context import require_page_user

STATIC_DIR = Path(__file__).resolve().parents[1] / "static"

router = APIRouter(tags=["pages"])


def page(name: str) -> FileResponse:
    return FileResponse(STATIC_DIR / name, media_type="text/html")


@router.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    return RedirectResponse("/login", status_code=302)


@router.get("/expenses/dashboard", dependencies=[Depends(require_page_user)])
async def dashboard() -> FileResponse:
    """Dashboard page for the signed-in user."""
    return page("dashboard.html")


@router.get("/expenses/history", dependencies=[Depends(require_page_user)])
async def history() -> FileResponse:
    """Expense history page for the signed-in user."""
    return page("history.html")
