from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.exceptions import ConcurrencyError, NotFoundError

logger = logging.getLogger(__name__)


def apply_versioned_update(
    session: Session,
    orm_type: type[Any],
    entity: Any,
    values: dict[str, Any],
    *,
    label: str,
) -> int:
    """
    UPDATE ... WHERE id = :id AND version = :expected, bumping the version.
    The entity's version is advanced in place on success.
    """
    expected_version = int(getattr(entity, "version", 1))
    next_version = expected_version + 1
    stmt = (
        update(orm_type)
        .where(orm_type.id == entity.id, orm_type.version == expected_version)
        .values(**values, version=next_version)
    )
    if session.execute(stmt).rowcount == 1:
        entity.version = next_version
        return next_version

    if session.get(orm_type, entity.id) is None:
        raise NotFoundError(f"{label.capitalize()} not found.", code=f"{label.upper()}_NOT_FOUND")
    logger.warning("Stale %s write rejected for %s at version %s", label, entity.id, expected_version)
    raise ConcurrencyError(f"{label.capitalize()} was updated by someone else.", code="STALE_WRITE")


__all__ = ["apply_versioned_update"]
