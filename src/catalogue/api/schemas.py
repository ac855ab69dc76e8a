"""Pydantic request schemas for the Catalogue API.

Only shapes and types live here. Field rules (required, lengths) are checked
by the product validator so every violation is reported in one response.
"""

from __future__ import annotations

from pydantic import BaseModel


class CreateProductRequest(BaseModel):
    name: str = ""
    category: str = ""
    image_url: str = ""


class UpdateProductRequest(BaseModel):
    # Omitted fields are left unchanged
    name: str | None = None
    category: str | None = None
    image_url: str | None = None
