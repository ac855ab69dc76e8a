"""Optimistic concurrency for versioned rows.

A row is *Current* for a caller while its stored ``version`` equals the
version the caller last read, and *Stale* once anyone else has written it.
Writes from a Current caller go through and bump the version by one; writes
from a Stale caller are rejected with ``ConflictError`` and change nothing.
A deleted row is terminal: any further write reports ``NotFoundError``.

The version comparison and the write happen in one UPDATE, so there is no
window between checking and writing.
"""

from __future__ import annotations

from collections.abc import Mapping

import sqlalchemy as sa
from sqlalchemy.engine import Connection, RowMapping

from shared.errors import ConflictError, NotFoundError
from shared.schema import MAX_INTEGER


def versioned_update(
    conn: Connection,
    table: sa.Table,
    key: Mapping[str, object],
    values: Mapping[str, object],
    expected_version: int,
) -> RowMapping:
    """Write ``values`` to the row matching ``key`` if it is still at ``expected_version``.

    Returns the updated row, including its new version.
    """
    match = [table.c[column] == value for column, value in key.items()]

    # A version outside the column range was never stored, so it is always stale
    if 1 <= expected_version <= MAX_INTEGER:
        stmt = (
            sa.update(table)
            .where(*match, table.c.version == expected_version)
            .values(**values, version=table.c.version + 1)
            .returning(*table.c)
        )
        row = conn.execute(stmt).mappings().first()
        if row is not None:
            return row

    # Zero rows: either the row is gone or someone else advanced the version
    still_there = conn.execute(sa.select(table.c.id).where(*match)).first()
    if still_there is None:
        raise NotFoundError()
    raise ConflictError()
