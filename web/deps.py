"""Shared FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from services.ask_service import AskService


class AskServiceUnavailable(RuntimeError):
    """The application started without an ask pipeline."""


def get_ask_service(request: Request) -> AskService:
    """Return the ask pipeline built at application startup."""
    service = getattr(request.app.state, "ask_service", None)
    if service is None:
        raise AskServiceUnavailable("Ask service is not initialised.")
    return service
