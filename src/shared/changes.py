"""Partial-update inputs.

A field left at ``UNSET`` means "no change"; ``None`` or ``""`` mean the
caller explicitly sent an empty value, which validation then judges.
"""

from dataclasses import fields, replace

# Sentinel for distinguishing "not provided" from None in partial updates
UNSET = object()


class Changes:
    """Mixin for dataclasses whose fields all default to ``UNSET``."""

    def present(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def apply_to(self, entity):
        return replace(entity, **self.present())
