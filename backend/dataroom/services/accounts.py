"""Account signup, login and lookup."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from .. import models
from ..auth import get_password_hash, verify_password
from ..errors import DuplicateEmail, InvalidCredentials, UserNotFound


def signup(db: Session, *, email: str, password: str, full_name: str = "") -> models.User:
    existing = db.query(models.User).filter(models.User.email == email).first()
    if existing:
        raise DuplicateEmail()
    user = models.User(
        email=email,
        full_name=full_name,
        hashed_password=get_password_hash(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def login(db: Session, *, email: str, password: str) -> models.User:
    user = db.query(models.User).filter(models.User.email == email).first()
    # same error for unknown email and wrong password
    if not user or not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


def get_user(db: Session, user_id: UUID) -> models.User:
    user = db.get(models.User, user_id)
    if not user:
        raise UserNotFound()
    return user
