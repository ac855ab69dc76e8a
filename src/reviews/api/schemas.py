"""Pydantic request schemas for the Reviews API.

Types only; the review validator owns the field rules.
"""

from __future__ import annotations

from pydantic import BaseModel


class CreateReviewRequest(BaseModel):
    rating: int = 0
    content: str = ""


class UpdateReviewRequest(BaseModel):
    # Omitted fields are left unchanged
    rating: int | None = None
    content: str | None = None
