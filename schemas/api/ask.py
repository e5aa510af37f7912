"""Pydantic schemas for the ask endpoints."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class AskRequest(BaseModel):
    """Request payload for /ask."""

    query: str = Field(
        ...,
        min_length=1,
        description="Free-text supply-chain question, e.g. 'Show me Schneider price history'.",
    )

    @field_validator("query", mode="before")
    def _reject_blank_query(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise ValueError("query must be a string")
        if not value.strip():
            raise ValueError("query must not be empty")
        return value


class AskResponse(BaseModel):
    answer: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
