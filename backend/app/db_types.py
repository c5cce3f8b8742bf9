"""Identifier column type shared by every table."""

from __future__ import annotations

import uuid
from typing import Any, Optional

from sqlalchemy.dialects import postgresql
from sqlalchemy.types import CHAR, TypeDecorator


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    """Parse ``value`` into a UUID, or ``None`` when it is not one."""

    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (ValueError, AttributeError):
        return None


def is_uuid(value: Any) -> bool:
    return parse_uuid(value) is not None


class GUID(TypeDecorator):
    """Primary and reference keys of clients, products, schedules and services.

    PostgreSQL keeps a native ``UUID``; SQLite gets the canonical lowercase
    36-character text. Bound values are canonicalised first, so an id typed in
    upper case or with stray whitespace still matches. Rows always come back
    with the id as ``str``.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):  # type: ignore[override]
        if dialect.name == "postgresql":
            return dialect.type_descriptor(postgresql.UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: Any, dialect):  # type: ignore[override]
        if value is None:
            return None
        parsed = parse_uuid(value)
        if parsed is None:
            # Never equal to a stored key; callers validate before querying.
            return str(value)
        if dialect.name == "postgresql":
            return parsed
        return str(parsed)

    def process_result_value(self, value: Any, dialect):  # type: ignore[override]
        return None if value is None else str(value)
