"""Resolve free-text client/product references to database identifiers."""

from __future__ import annotations

import logging
from typing import Callable, Hashable, Optional

from sqlalchemy.orm import Session

from ..db_types import is_uuid

LOGGER = logging.getLogger(__name__)

Lookup = Callable[[str], Optional[str]]


class _NotFound:
    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


class LookupCache:
    """Memoises resolutions for the lifetime of a single batch.

    The caller creates one per bulk request and hands it to every resolver
    used by that request; it is discarded with the request.
    """

    def __init__(self, seed: Optional[dict[Hashable, object]] = None) -> None:
        self._entries: dict[Hashable, object] = dict(seed or {})

    def get(self, key: Hashable) -> object:
        return self._entries.get(key)

    def set(self, key: Hashable, value: Optional[str]) -> None:
        self._entries[key] = NOT_FOUND if value is None else value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class EntityLookup:
    """Two-step lookup: primary key first, then a name substring match.

    Both sides of the name comparison are casefolded in Python, so accented
    capitals match on every backend and ``%``/``_`` are literal characters.
    The oldest matching row wins.
    """

    def __init__(self, db: Session, model) -> None:
        self.db = db
        self.model = model

    def __call__(self, value: str) -> Optional[str]:
        if is_uuid(value):
            entity = self.db.get(self.model, value.strip())
            if entity is not None:
                return entity.id

        needle = value.casefold()
        candidates = self.db.query(self.model.id, self.model.name).order_by(
            self.model.created_at, self.model.id
        )
        for entity_id, name in candidates:
            if name and needle in name.casefold():
                return entity_id
        return None


class IdentityResolver:
    """Resolves references for one entity kind using a shared batch cache."""

    def __init__(self, lookup: Lookup, cache: LookupCache, *, entity: str) -> None:
        self.lookup = lookup
        self.cache = cache
        self.entity = entity

    @classmethod
    def for_model(cls, db: Session, model, cache: LookupCache) -> "IdentityResolver":
        return cls(EntityLookup(db, model), cache, entity=model.__tablename__)

    def resolve(self, value: object) -> Optional[str]:
        """Return the identifier for ``value`` or ``None`` when nothing matches."""

        if value is None:
            return None
        text = str(value).strip()
        if not text:
            return None

        key = (self.entity, text)
        if key in self.cache:
            cached = self.cache.get(key)
            return None if cached is NOT_FOUND else cached  # type: ignore[return-value]

        resolved = self.lookup(text)
        if resolved is None:
            LOGGER.debug("No %s matches %r", self.entity, text)
        self.cache.set(key, resolved)
        return resolved
