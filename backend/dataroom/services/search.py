from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from .. import models
from ..errors import UserNotFound
from . import access, tree

PATH_SEPARATOR = " > "


def search_all(db: Session, *, actor_id: UUID) -> list[dict]:
    """Flatten every dataroom, folder and file the user can reach.

    Each entry carries a display path such as ``"Deals > Q1 > report.pdf"``
    so the client can filter locally. Cost grows with grants, entities and
    folder depth.
    """

    user = db.get(models.User, actor_id)
    if not user:
        raise UserNotFound()

    results: list[dict] = []
    for grant in access.list_for_user(db, user.email):
        dataroom = db.get(models.Dataroom, grant.dataroom_id)
        if not dataroom:
            continue
        results.append(
            {
                "type": "dataroom",
                "id": dataroom.id,
                "name": dataroom.name,
                "path": dataroom.name,
                "dataroom_id": dataroom.id,
                "folder_id": None,
                "role": grant.role,
            }
        )

        # loaded up front so breadcrumb walks hit the identity map
        folders = (
            db.query(models.Folder)
            .filter(models.Folder.dataroom_id == dataroom.id)
            .order_by(models.Folder.created_at.asc())
            .all()
        )
        folder_paths: dict[UUID, str] = {}
        for folder in folders:
            crumbs = tree.build_breadcrumb_path(db, folder.id, dataroom.id)
            folder_paths[folder.id] = PATH_SEPARATOR.join(
                [dataroom.name, *(crumb["name"] for crumb in crumbs)]
            )
            results.append(
                {
                    "type": "folder",
                    "id": folder.id,
                    "name": folder.name,
                    "path": folder_paths[folder.id],
                    "dataroom_id": dataroom.id,
                    "folder_id": folder.id,
                }
            )

        files = (
            db.query(models.File)
            .filter(models.File.dataroom_id == dataroom.id)
            .order_by(models.File.created_at.asc())
            .all()
        )
        for file in files:
            # orphaned files fall back to the dataroom root
            parent_path = folder_paths.get(file.folder_id, dataroom.name)
            results.append(
                {
                    "type": "file",
                    "id": file.id,
                    "name": file.name,
                    "path": f"{parent_path}{PATH_SEPARATOR}{file.name}",
                    "dataroom_id": dataroom.id,
                    "folder_id": file.folder_id,
                }
            )
    return results
