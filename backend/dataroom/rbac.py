from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from . import models
from .errors import AccessDenied, InsufficientPermissions, UserNotFound

# purpose: centralize dataroom role ordering and the authorization choke-point
# status: active

_ROLE_LEVELS: dict[str, int] = {
    "viewer": 1,
    "editor": 2,
    "admin": 3,
    "owner": 4,
}

ROLES: tuple[str, ...] = tuple(sorted(_ROLE_LEVELS, key=_ROLE_LEVELS.__getitem__, reverse=True))
INVITABLE_ROLES: tuple[str, ...] = ("admin", "editor", "viewer")


def role_level(role: str) -> int:
    return _ROLE_LEVELS[role]


def meets_minimum(actual: str, required: str) -> bool:
    """Return True when ``actual`` ranks at or above ``required``."""

    return _ROLE_LEVELS[actual] >= _ROLE_LEVELS[required]


def lookup_grant(db: Session, dataroom_id: UUID, user_email: str) -> models.DataroomAccess | None:
    return (
        db.query(models.DataroomAccess)
        .filter(
            models.DataroomAccess.dataroom_id == dataroom_id,
            models.DataroomAccess.user_email == user_email,
        )
        .first()
    )


def authorize(
    db: Session,
    user_id: UUID,
    dataroom_id: UUID,
    minimum_role: str | None = None,
) -> models.DataroomAccess:
    """Return the user's grant on the dataroom or raise.

    Without ``minimum_role`` any grant is enough. Callers may inspect the
    returned grant's role.
    """

    user = db.get(models.User, user_id)
    if not user:
        raise UserNotFound()
    grant = lookup_grant(db, dataroom_id, user.email)
    if not grant:
        raise AccessDenied()
    if minimum_role and not meets_minimum(grant.role, minimum_role):
        raise InsufficientPermissions()
    return grant
