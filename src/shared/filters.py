"""Pagination, sorting, and page metadata for every listing.

The sort key handed to a store always comes out of a developer-defined
safelist, so untrusted input never reaches an ORDER BY clause.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum

from shared.errors import ValidationError
from shared.validation import Validator

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


class SortDirection(Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class Filters:
    """Page window and sort request for one listing call."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    sort: str = "id"
    sort_safelist: tuple[str, ...] = ("id",)

    def validate(self, v: Validator) -> None:
        v.check(self.page > 0, "page", "must be greater than zero")
        v.check(self.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
        v.check(self.page_size > 0, "page_size", "must be greater than zero")
        v.check(self.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")
        v.check(_bare(self.sort) in _bare_safelist(self.sort_safelist), "sort", "invalid sort value")

    def sort_column(self) -> str:
        return resolve_sort(self.sort, self.sort_safelist)[0]

    def sort_direction(self) -> SortDirection:
        return resolve_sort(self.sort, self.sort_safelist)[1]

    def limit(self) -> int:
        return compute_window(self.page, self.page_size)[0]

    def offset(self) -> int:
        return compute_window(self.page, self.page_size)[1]


def validate_filters(filters: Filters) -> None:
    """Raise ``ValidationError`` listing every problem with ``filters``."""
    v = Validator()
    filters.validate(v)
    v.raise_if_invalid()


def _bare(sort: str) -> str:
    return sort[1:] if sort.startswith("-") else sort


def _bare_safelist(allow_list) -> set[str]:
    # Safelists may carry both "name" and "-name"; only the bare column matters
    return {_bare(entry) for entry in allow_list}


def resolve_sort(requested: str, allow_list) -> tuple[str, SortDirection]:
    """Map a ``[-]column`` sort request to a safelisted column and direction."""
    column = _bare(requested)
    if not column or column not in _bare_safelist(allow_list):
        raise ValidationError({"sort": ["invalid sort value"]})

    direction = SortDirection.DESC if requested.startswith("-") else SortDirection.ASC
    return column, direction


def compute_window(page: int, page_size: int) -> tuple[int, int]:
    """Return ``(limit, offset)``. Inputs must already be validated."""
    return page_size, (page - 1) * page_size


@dataclass(frozen=True)
class Metadata:
    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def build_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    """Describe where ``page`` sits in ``total_records`` matching rows.

    No matches yields the all-zero Metadata, not "page 1 of 1". A page past
    the end is echoed back unchanged.
    """
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=math.ceil(total_records / page_size),
        total_records=total_records,
    )
