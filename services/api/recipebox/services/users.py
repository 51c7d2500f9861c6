"""Account registration and profile self-service."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import ValidationFailed
from ..models import User

logger = logging.getLogger("recipebox.users")


def _commit_unique_email(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationFailed("Email is already registered")


def register_user(db: Session, name: str, email: str) -> User:
    user = User(name=name, email=email)
    db.add(user)
    _commit_unique_email(db)
    db.refresh(user)
    logger.info(f"Registered user {user.id}")
    return user


def update_profile(db: Session, user: User, data: dict[str, Any]) -> User:
    """Apply name/email changes. Tier and billing fields are not editable here."""
    for field in ("name", "email"):
        if field in data:
            setattr(user, field, data[field])
    _commit_unique_email(db)
    db.refresh(user)
    logger.info(f"Updated profile of user {user.id}")
    return user
