"""Persistence boundary for validated batches.

Rows are written one SAVEPOINT at a time so that a row rejected by the
database (constraint violation, bad value) is rolled back alone while the
rest of the batch still commits. No business rules are applied here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

LOGGER = logging.getLogger(__name__)


@dataclass
class BulkWriteFailure:
    """A row the database refused, with the reason reported by the driver."""

    input: Any
    reason: str


@dataclass
class BulkWriteResult:
    succeeded: list[str] = field(default_factory=list)
    failed: list[BulkWriteFailure] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.succeeded)

    @property
    def partial(self) -> bool:
        return bool(self.failed)

    def failure_messages(self, limit: int | None = None) -> list[str]:
        messages = [failure.reason for failure in self.failed]
        return messages if limit is None else messages[:limit]


def _describe(error: Exception) -> str:
    return str(getattr(error, "orig", None) or error).strip()


def insert_many(
    db: Session,
    model,
    records: Iterable[Mapping[str, Any]],
) -> BulkWriteResult:
    """Insert ``records`` without letting one bad row abort the others."""

    result = BulkWriteResult()
    for record in records:
        savepoint = db.begin_nested()
        try:
            instance = model(**record)
            db.add(instance)
            db.flush()
            savepoint.commit()
            result.succeeded.append(instance.id)
        except (SQLAlchemyError, TypeError, ValueError, LookupError) as exc:
            savepoint.rollback()
            result.failed.append(BulkWriteFailure(input=dict(record), reason=_describe(exc)))

    db.commit()
    if result.failed:
        LOGGER.warning(
            "Bulk insert into %s stored %d row(s), %d failed",
            model.__tablename__,
            result.count,
            len(result.failed),
        )
    else:
        LOGGER.info("Bulk insert into %s stored %d row(s)", model.__tablename__, result.count)
    return result


def update_many_by_key(
    db: Session,
    model,
    key: str,
    updates: Iterable[Mapping[str, Any]],
) -> BulkWriteResult:
    """Apply ``{key: value, "changes": {...}}`` updates matched by ``key``.

    When several rows share the key, the most recently created one is
    updated.
    """

    column = getattr(model, key)
    result = BulkWriteResult()
    for update in updates:
        key_value = update[key]
        changes = dict(update.get("changes") or {})
        savepoint = db.begin_nested()
        try:
            target = (
                db.query(model)
                .filter(column == key_value)
                .order_by(model.created_at.desc(), model.id.desc())
                .first()
            )
            if target is None:
                savepoint.rollback()
                result.failed.append(
                    BulkWriteFailure(
                        input=dict(update),
                        reason=f"Chassi {key_value}: registro não encontrado",
                    )
                )
                continue
            for attribute, value in changes.items():
                setattr(target, attribute, value)
            db.flush()
            savepoint.commit()
            result.succeeded.append(target.id)
        except (SQLAlchemyError, TypeError, ValueError, LookupError) as exc:
            savepoint.rollback()
            result.failed.append(
                BulkWriteFailure(
                    input=dict(update),
                    reason=f"Chassi {key_value}: {_describe(exc)}",
                )
            )

    db.commit()
    if result.failed:
        LOGGER.warning(
            "Bulk update of %s modified %d row(s), %d failed",
            model.__tablename__,
            result.count,
            len(result.failed),
        )
    else:
        LOGGER.info("Bulk update of %s modified %d row(s)", model.__tablename__, result.count)
    return result
