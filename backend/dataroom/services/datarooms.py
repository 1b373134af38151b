from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.orm import Session

from .. import models, storage
from ..errors import DuplicateName, NotFound, UserNotFound
from ..rbac import authorize
from . import access, tree

# purpose: dataroom lifecycle from creation with its owner grant to full teardown
# status: active

logger = logging.getLogger(__name__)


def _owned_name_taken(db: Session, user_email: str, name: str) -> bool:
    return (
        db.query(models.Dataroom.id)
        .join(models.DataroomAccess, models.DataroomAccess.dataroom_id == models.Dataroom.id)
        .filter(
            models.DataroomAccess.user_email == user_email,
            models.DataroomAccess.role == "owner",
            sa.func.lower(models.Dataroom.name) == name.lower(),
        )
        .first()
        is not None
    )


def create_dataroom(db: Session, name: str, *, actor_id: UUID) -> models.Dataroom:
    """Create a dataroom together with the creator's owner grant."""

    user = db.get(models.User, actor_id)
    if not user:
        raise UserNotFound()
    tree.validate_name(name)
    if _owned_name_taken(db, user.email, name):
        raise DuplicateName("You already own a dataroom with this name")

    now = datetime.now(timezone.utc)
    dataroom = models.Dataroom(name=name, created_by=user.id, created_at=now, updated_at=now)
    db.add(dataroom)
    db.flush()
    access.grant_owner(db, dataroom, user.email)
    db.commit()
    db.refresh(dataroom)
    logger.info("created dataroom %s for %s", dataroom.id, user.email)
    return dataroom


def list_my_datarooms(db: Session, *, actor_id: UUID) -> list[tuple[models.Dataroom, str]]:
    """Return ``(dataroom, role)`` pairs for every grant the user holds, newest first."""

    user = db.get(models.User, actor_id)
    if not user:
        raise UserNotFound()
    rows = (
        db.query(models.Dataroom, models.DataroomAccess.role)
        .join(models.DataroomAccess, models.DataroomAccess.dataroom_id == models.Dataroom.id)
        .filter(models.DataroomAccess.user_email == user.email)
        .order_by(models.Dataroom.created_at.desc())
        .all()
    )
    return [(dataroom, role) for dataroom, role in rows]


def _get_or_404(db: Session, dataroom_id: UUID) -> models.Dataroom:
    dataroom = db.get(models.Dataroom, dataroom_id)
    if not dataroom:
        raise NotFound("Dataroom not found")
    return dataroom


def get_dataroom(db: Session, dataroom_id: UUID, *, actor_id: UUID) -> tuple[models.Dataroom, str]:
    grant = authorize(db, actor_id, dataroom_id)
    return _get_or_404(db, dataroom_id), grant.role


def rename_dataroom(db: Session, dataroom_id: UUID, name: str, *, actor_id: UUID) -> models.Dataroom:
    dataroom = _get_or_404(db, dataroom_id)
    authorize(db, actor_id, dataroom_id, "admin")
    tree.validate_name(name)
    dataroom.name = name
    dataroom.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(dataroom)
    return dataroom


def get_dataroom_item_count(db: Session, dataroom_id: UUID, *, actor_id: UUID) -> dict[str, int]:
    authorize(db, actor_id, dataroom_id)
    return tree.count_children(db, dataroom_id, None)


def delete_dataroom(db: Session, dataroom_id: UUID, *, actor_id: UUID) -> tree.CascadeResult:
    """Tear down a dataroom: folders, files, access grants, then the record.

    Each phase commits on its own; there is no transaction around the whole
    teardown.
    """

    _get_or_404(db, dataroom_id)
    authorize(db, actor_id, dataroom_id, "owner")

    result = tree.CascadeResult()
    root_ids = [
        folder_id
        for (folder_id,) in db.query(models.Folder.id).filter(
            models.Folder.dataroom_id == dataroom_id,
            models.Folder.parent_folder_id.is_(None),
        )
    ]
    for folder_id in root_ids:
        result += tree.cascade_delete_folder(db, folder_id)
    # folders cut off from the root by an earlier interrupted cascade
    leftover_ids = [
        folder_id
        for (folder_id,) in db.query(models.Folder.id).filter(models.Folder.dataroom_id == dataroom_id)
    ]
    for folder_id in leftover_ids:
        if db.get(models.Folder, folder_id) is not None:
            result += tree.cascade_delete_folder(db, folder_id)

    files = db.query(models.File).filter(models.File.dataroom_id == dataroom_id).all()
    for file in files:
        storage_ref = file.storage_ref
        db.delete(file)
        storage.delete_object(storage_ref)
    db.commit()
    result += tree.CascadeResult(files=len(files))

    for grant in access.list_for_dataroom(db, dataroom_id):
        db.delete(grant)
    db.commit()

    db.delete(_get_or_404(db, dataroom_id))
    db.commit()
    logger.info(
        "deleted dataroom %s (%d folders, %d files)",
        dataroom_id,
        result.folders,
        result.files,
    )
    return result
