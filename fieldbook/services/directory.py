"""Lookups against the user and facility tables owned by other services."""
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..db import models


def find_user(db: Session, user_id: int) -> models.User:
    user = db.get(models.User, user_id)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")
    return user


def find_field(db: Session, field_id: int, *, lock: bool = False) -> models.Field:
    """Fetch a field, optionally taking a row lock.

    Writers lock the field row so create/update calls targeting the same
    field run one after another.
    """
    stmt = select(models.Field).where(models.Field.id == field_id)
    if lock:
        stmt = stmt.with_for_update()
    field = db.execute(stmt).scalar_one_or_none()
    if not field:
        raise NotFoundError(f"Field with ID {field_id} not found")
    return field
