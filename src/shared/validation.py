"""Collect-all field validation."""

from shared.errors import ValidationError


class Validator:
    """Accumulates every failed check before reporting.

    Usage::

        v = Validator()
        v.check(name != "", "name", "must be provided")
        v.check(len(name) <= 100, "name", "must not be more than 100 characters")
        v.raise_if_invalid()
    """

    def __init__(self):
        self.errors: dict[str, list[str]] = {}

    @property
    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise ValidationError(dict(self.errors))


def check_required_text(v: Validator, value, field: str, max_length: int) -> None:
    """Required, non-empty string no longer than ``max_length`` characters."""
    if value is None or value == "":
        v.add_error(field, "must be provided")
        return
    if not isinstance(value, str):
        v.add_error(field, "must be a string")
        return
    v.check(len(value) <= max_length, field, f"must not be more than {max_length} characters")
