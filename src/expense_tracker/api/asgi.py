"""ASGI entrypoint for the expense tracker."""

from expense_tracker.api.app import create_app
from expense_tracker.containers import build_container

app = create_app(build_container())
