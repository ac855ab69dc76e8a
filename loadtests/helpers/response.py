"""Turn an API error response into one loggable line."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

_MAX_DETAIL = 300


def _field_messages(error: dict) -> str:
    return " | ".join(f"{field}: {', '.join(messages)}" for field, messages in error.items())


def _schema_messages(detail: list) -> str:
    # FastAPI request-model errors: [{"loc": ["body", "rating"], "msg": "..."}]
    return " | ".join(f"{'.'.join(map(str, item.get('loc', [])))}: {item.get('msg', '')}" for item in detail)


def extract_error_detail(response: Response) -> str:
    """Render ``{"error": ...}`` and ``{"detail": [...]}`` bodies; fall back to raw text."""
    try:
        body = response.json()
    except ValueError:
        return (response.text or "(empty response body)")[:_MAX_DETAIL]

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return _field_messages(error)
    if error is not None:
        return str(error)
    if isinstance(body, dict) and isinstance(body.get("detail"), list):
        return _schema_messages(body["detail"])
    return str(body)[:_MAX_DETAIL]
