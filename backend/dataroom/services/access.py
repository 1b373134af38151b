"""Dataroom access grants: owner grant, invitations, role changes, revocation."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from .. import models, tasks
from ..errors import DuplicateAccess, ImmutableOwner, NotFound
from ..rbac import INVITABLE_ROLES, authorize, lookup_grant

# purpose: own the (dataroom, email) -> role relation behind the access guard
# status: active

logger = logging.getLogger(__name__)


def grant_owner(db: Session, dataroom: models.Dataroom, user_email: str) -> models.DataroomAccess:
    """Stage the owner grant for a freshly created dataroom.

    The caller guarantees no grant exists yet and commits.
    """

    grant = models.DataroomAccess(
        dataroom_id=dataroom.id,
        user_email=user_email,
        role="owner",
        invited_at=datetime.now(timezone.utc),
        invited_by=dataroom.created_by,
    )
    db.add(grant)
    db.flush()
    return grant


def lookup(db: Session, dataroom_id: UUID, user_email: str) -> models.DataroomAccess | None:
    return lookup_grant(db, dataroom_id, user_email)


def list_for_user(db: Session, user_email: str) -> list[models.DataroomAccess]:
    return (
        db.query(models.DataroomAccess)
        .filter(models.DataroomAccess.user_email == user_email)
        .all()
    )


def list_for_dataroom(db: Session, dataroom_id: UUID) -> list[models.DataroomAccess]:
    return (
        db.query(models.DataroomAccess)
        .filter(models.DataroomAccess.dataroom_id == dataroom_id)
        .order_by(models.DataroomAccess.invited_at.asc())
        .all()
    )


def list_access(db: Session, dataroom_id: UUID, *, actor_id: UUID) -> list[models.DataroomAccess]:
    authorize(db, actor_id, dataroom_id, "admin")
    return list_for_dataroom(db, dataroom_id)


def check_access(db: Session, user_id: UUID, dataroom_id: UUID) -> models.DataroomAccess | None:
    """Return the user's grant, or None when the user or grant is missing."""

    user = db.get(models.User, user_id)
    if not user:
        return None
    return lookup_grant(db, dataroom_id, user.email)


def invite(
    db: Session,
    dataroom_id: UUID,
    user_email: str,
    role: str,
    *,
    actor_id: UUID,
    background_tasks: BackgroundTasks | None = None,
) -> models.DataroomAccess:
    """Grant ``role`` to ``user_email`` and schedule the invitation email.

    With ``background_tasks`` the email is dispatched after the response has
    been sent; otherwise it is dispatched before returning.
    """

    if role not in INVITABLE_ROLES:
        raise ValueError(f"role must be one of {', '.join(INVITABLE_ROLES)}")
    authorize(db, actor_id, dataroom_id, "admin")
    if lookup_grant(db, dataroom_id, user_email):
        raise DuplicateAccess()

    grant = models.DataroomAccess(
        dataroom_id=dataroom_id,
        user_email=user_email,
        role=role,
        invited_at=datetime.now(timezone.utc),
        invited_by=actor_id,
    )
    db.add(grant)
    db.commit()
    db.refresh(grant)
    logger.info("granted %s on dataroom %s to %s", role, dataroom_id, user_email)

    if background_tasks is not None:
        background_tasks.add_task(tasks.schedule_invitation_email, dataroom_id, actor_id, user_email, role)
    else:
        tasks.schedule_invitation_email(dataroom_id, actor_id, user_email, role)
    return grant


def _get_mutable_grant(db: Session, access_id: UUID, owner_message: str) -> models.DataroomAccess:
    grant = db.get(models.DataroomAccess, access_id)
    if not grant:
        raise NotFound("Access record not found")
    if grant.role == "owner":
        raise ImmutableOwner(owner_message)
    return grant


def update_role(db: Session, access_id: UUID, new_role: str, *, actor_id: UUID) -> models.DataroomAccess:
    if new_role not in INVITABLE_ROLES:
        raise ValueError(f"role must be one of {', '.join(INVITABLE_ROLES)}")
    grant = _get_mutable_grant(db, access_id, "Cannot change owner role")
    authorize(db, actor_id, grant.dataroom_id, "admin")
    grant.role = new_role
    db.commit()
    db.refresh(grant)
    logger.info("changed grant %s on dataroom %s to %s", grant.id, grant.dataroom_id, new_role)
    return grant


def revoke(db: Session, access_id: UUID, *, actor_id: UUID) -> UUID:
    grant = _get_mutable_grant(db, access_id, "Cannot remove owner access")
    authorize(db, actor_id, grant.dataroom_id, "admin")
    user_email, dataroom_id = grant.user_email, grant.dataroom_id
    db.delete(grant)
    db.commit()
    logger.info("revoked %s access on dataroom %s", user_email, dataroom_id)
    return access_id
