"""Tests for the collect-all validator and partial-update inputs."""

from dataclasses import dataclass
from typing import Any

import pytest
from shared.changes import UNSET, Changes
from shared.errors import ValidationError
from shared.validation import Validator, check_required_text


class TestValidator:
    def test_starts_valid(self):
        v = Validator()
        assert v.valid
        v.raise_if_invalid()

    def test_failed_check_records_message(self):
        v = Validator()
        v.check(False, "name", "must be provided")
        assert not v.valid
        assert v.errors == {"name": ["must be provided"]}

    def test_passing_check_records_nothing(self):
        v = Validator()
        v.check(True, "name", "must be provided")
        assert v.valid

    def test_reports_all_violations_together(self):
        v = Validator()
        v.check(False, "name", "must be provided")
        v.check(False, "category", "must be provided")
        v.check(False, "category", "must not be more than 50 characters")

        with pytest.raises(ValidationError) as exc:
            v.raise_if_invalid()

        assert exc.value.messages == {
            "name": ["must be provided"],
            "category": ["must be provided", "must not be more than 50 characters"],
        }
        assert "category: must be provided, must not be more than 50 characters" in str(exc.value)


class TestRequiredText:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        v = Validator()
        check_required_text(v, value, "content", 10)
        assert v.errors == {"content": ["must be provided"]}

    def test_too_long(self):
        v = Validator()
        check_required_text(v, "x" * 11, "content", 10)
        assert v.errors == {"content": ["must not be more than 10 characters"]}

    def test_at_limit(self):
        v = Validator()
        check_required_text(v, "x" * 10, "content", 10)
        assert v.valid

    def test_wrong_type(self):
        v = Validator()
        check_required_text(v, 42, "content", 10)
        assert v.errors == {"content": ["must be a string"]}


@dataclass
class _Thing:
    a: str
    b: int


@dataclass
class _ThingChanges(Changes):
    a: Any = UNSET
    b: Any = UNSET


class TestChanges:
    def test_absent_fields_are_left_alone(self):
        thing = _ThingChanges(b=7).apply_to(_Thing(a="keep", b=1))
        assert thing == _Thing(a="keep", b=7)

    def test_explicit_empty_values_are_applied(self):
        changes = _ThingChanges(a="", b=None)
        assert changes.present() == {"a": "", "b": None}
        assert changes.apply_to(_Thing(a="old", b=1)) == _Thing(a="", b=None)

    def test_nothing_present(self):
        original = _Thing(a="x", b=2)
        assert _ThingChanges().present() == {}
        assert _ThingChanges().apply_to(original) == original
