"""Folder and file hierarchy inside a dataroom.

Folders nest under a dataroom root or a parent folder; files sit at the root
or in one folder. Every public operation starts with ``rbac.authorize`` on the
owning dataroom. Sibling names are unique per (dataroom, parent) scope, which
is checked before each insert or rename rather than enforced by the schema.

Deleting a folder removes its whole subtree in post-order: at every level the
subfolders go first, then the files directly inside (their stored objects are
released), then the folder record. The walk uses an explicit stack and commits
after each folder, so an interrupted cascade leaves a strict subset of the
subtree deleted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from .. import models, storage
from ..errors import DuplicateName, InvalidMimeType, InvalidName, NotFound, StorageConflict
from ..rbac import authorize

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
MAX_NAME_LENGTH = 255
_INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


@dataclass(frozen=True)
class CascadeResult:
    folders: int = 0
    files: int = 0

    def __add__(self, other: "CascadeResult") -> "CascadeResult":
        return CascadeResult(self.folders + other.folders, self.files + other.files)


def validate_name(name: str) -> str:
    if not name or not name.strip():
        raise InvalidName("Name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidName(f"Name is too long (max {MAX_NAME_LENGTH} characters)")
    if _INVALID_NAME_CHARS.search(name):
        raise InvalidName("Name contains invalid characters")
    return name


def _same_scope(column, value):
    return column.is_(None) if value is None else column == value


def _folder_name_taken(
    db: Session,
    dataroom_id: UUID,
    parent_folder_id: UUID | None,
    name: str,
    exclude_id: UUID | None = None,
) -> bool:
    query = db.query(models.Folder.id).filter(
        models.Folder.dataroom_id == dataroom_id,
        _same_scope(models.Folder.parent_folder_id, parent_folder_id),
        models.Folder.name == name,
    )
    if exclude_id is not None:
        query = query.filter(models.Folder.id != exclude_id)
    return query.first() is not None


def _file_name_taken(
    db: Session,
    dataroom_id: UUID,
    folder_id: UUID | None,
    name: str,
    exclude_id: UUID | None = None,
) -> bool:
    query = db.query(models.File.id).filter(
        models.File.dataroom_id == dataroom_id,
        _same_scope(models.File.folder_id, folder_id),
        models.File.name == name,
    )
    if exclude_id is not None:
        query = query.filter(models.File.id != exclude_id)
    return query.first() is not None


def _storage_ref_taken(db: Session, storage_ref: str) -> bool:
    return (
        db.query(models.File.id).filter(models.File.storage_ref == storage_ref).first()
        is not None
    )


def _require_folder_in_dataroom(db: Session, folder_id: UUID | None, dataroom_id: UUID) -> None:
    if folder_id is None:
        return
    folder = db.get(models.Folder, folder_id)
    if not folder or folder.dataroom_id != dataroom_id:
        raise NotFound("Parent folder not found")


# listing


def query_folders(db: Session, dataroom_id: UUID, parent_folder_id: UUID | None) -> list[models.Folder]:
    return (
        db.query(models.Folder)
        .filter(
            models.Folder.dataroom_id == dataroom_id,
            _same_scope(models.Folder.parent_folder_id, parent_folder_id),
        )
        .order_by(models.Folder.name.asc())
        .all()
    )


def query_files(db: Session, dataroom_id: UUID, folder_id: UUID | None) -> list[models.File]:
    return (
        db.query(models.File)
        .filter(
            models.File.dataroom_id == dataroom_id,
            _same_scope(models.File.folder_id, folder_id),
        )
        .order_by(models.File.name.asc())
        .all()
    )


def list_folders(db: Session, dataroom_id: UUID, parent_folder_id: UUID | None, *, actor_id: UUID):
    authorize(db, actor_id, dataroom_id)
    return query_folders(db, dataroom_id, parent_folder_id)


def list_files(db: Session, dataroom_id: UUID, folder_id: UUID | None, *, actor_id: UUID):
    authorize(db, actor_id, dataroom_id)
    return query_files(db, dataroom_id, folder_id)


def list_children(
    db: Session,
    dataroom_id: UUID,
    parent_folder_id: UUID | None,
    *,
    actor_id: UUID,
) -> tuple[list[models.Folder], list[models.File]]:
    """Return the folders and files directly under one (dataroom, parent) key."""

    authorize(db, actor_id, dataroom_id)
    return (
        query_folders(db, dataroom_id, parent_folder_id),
        query_files(db, dataroom_id, parent_folder_id),
    )


def list_all_folders(db: Session, dataroom_id: UUID, *, actor_id: UUID) -> list[models.Folder]:
    authorize(db, actor_id, dataroom_id)
    return (
        db.query(models.Folder)
        .filter(models.Folder.dataroom_id == dataroom_id)
        .order_by(models.Folder.created_at.asc())
        .all()
    )


def count_children(db: Session, dataroom_id: UUID, parent_folder_id: UUID | None) -> dict[str, int]:
    """Count direct children only; nested descendants are not included."""

    folders = (
        db.query(models.Folder)
        .filter(
            models.Folder.dataroom_id == dataroom_id,
            _same_scope(models.Folder.parent_folder_id, parent_folder_id),
        )
        .count()
    )
    files = (
        db.query(models.File)
        .filter(
            models.File.dataroom_id == dataroom_id,
            _same_scope(models.File.folder_id, parent_folder_id),
        )
        .count()
    )
    return {"folders": folders, "files": files, "total": folders + files}


# folders


def get_folder(db: Session, folder_id: UUID, dataroom_id: UUID, *, actor_id: UUID) -> models.Folder:
    authorize(db, actor_id, dataroom_id)
    folder = db.get(models.Folder, folder_id)
    if not folder or folder.dataroom_id != dataroom_id:
        raise NotFound("Folder not found")
    return folder


def create_folder(
    db: Session,
    dataroom_id: UUID,
    parent_folder_id: UUID | None,
    name: str,
    *,
    actor_id: UUID,
) -> models.Folder:
    authorize(db, actor_id, dataroom_id, "editor")
    validate_name(name)
    _require_folder_in_dataroom(db, parent_folder_id, dataroom_id)
    if _folder_name_taken(db, dataroom_id, parent_folder_id, name):
        raise DuplicateName("A folder with this name already exists")

    now = datetime.now(timezone.utc)
    folder = models.Folder(
        name=name,
        dataroom_id=dataroom_id,
        parent_folder_id=parent_folder_id,
        created_at=now,
        updated_at=now,
    )
    db.add(folder)
    db.commit()
    db.refresh(folder)
    return folder


def rename_folder(db: Session, folder_id: UUID, name: str, *, actor_id: UUID) -> models.Folder:
    folder = db.get(models.Folder, folder_id)
    if not folder:
        raise NotFound("Folder not found")
    authorize(db, actor_id, folder.dataroom_id, "editor")
    validate_name(name)
    if _folder_name_taken(db, folder.dataroom_id, folder.parent_folder_id, name, exclude_id=folder.id):
        raise DuplicateName("A folder with this name already exists")
    folder.name = name
    folder.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(folder)
    return folder


def cascade_delete_folder(db: Session, folder_id: UUID) -> CascadeResult:
    """Delete a folder and everything beneath it without an authorization check."""

    folders_deleted = 0
    files_deleted = 0
    # (folder id, children already pushed)
    stack: list[tuple[UUID, bool]] = [(folder_id, False)]
    while stack:
        current_id, expanded = stack.pop()
        if not expanded:
            stack.append((current_id, True))
            children = (
                db.query(models.Folder.id)
                .filter(models.Folder.parent_folder_id == current_id)
                .order_by(models.Folder.created_at.asc())
                .all()
            )
            stack.extend((child_id, False) for (child_id,) in reversed(children))
            continue

        files = db.query(models.File).filter(models.File.folder_id == current_id).all()
        for file in files:
            storage_ref = file.storage_ref
            db.delete(file)
            storage.delete_object(storage_ref)
            files_deleted += 1
        folder = db.get(models.Folder, current_id)
        if folder:
            db.delete(folder)
            folders_deleted += 1
        db.commit()

    return CascadeResult(folders=folders_deleted, files=files_deleted)


def delete_folder(db: Session, folder_id: UUID, *, actor_id: UUID) -> CascadeResult:
    folder = db.get(models.Folder, folder_id)
    if not folder:
        raise NotFound("Folder not found")
    authorize(db, actor_id, folder.dataroom_id, "editor")
    dataroom_id = folder.dataroom_id
    result = cascade_delete_folder(db, folder_id)
    logger.info(
        "deleted folder %s in dataroom %s (%d folders, %d files)",
        folder_id,
        dataroom_id,
        result.folders,
        result.files,
    )
    return result


def get_folder_item_count(db: Session, folder_id: UUID, *, actor_id: UUID) -> dict[str, int]:
    folder = db.get(models.Folder, folder_id)
    if not folder:
        raise NotFound("Folder not found")
    authorize(db, actor_id, folder.dataroom_id)
    return count_children(db, folder.dataroom_id, folder.id)


def build_breadcrumb_path(db: Session, folder_id: UUID, dataroom_id: UUID) -> list[dict]:
    """Walk parent pointers up from ``folder_id`` and return root-to-leaf crumbs.

    The walk stops at the root, at a missing folder, or at a folder that
    belongs to another dataroom. Unknown ids give an empty path.
    """

    path: list[dict] = []
    seen: set[UUID] = set()
    current_id = folder_id
    while current_id is not None and current_id not in seen:
        seen.add(current_id)
        folder = db.get(models.Folder, current_id)
        if not folder or folder.dataroom_id != dataroom_id:
            break
        path.append({"id": folder.id, "name": folder.name})
        current_id = folder.parent_folder_id
    path.reverse()
    return path


def get_breadcrumb_path(db: Session, folder_id: UUID, dataroom_id: UUID, *, actor_id: UUID) -> list[dict]:
    authorize(db, actor_id, dataroom_id)
    return build_breadcrumb_path(db, folder_id, dataroom_id)


# files


def get_file(db: Session, file_id: UUID, *, actor_id: UUID) -> models.File:
    file = db.get(models.File, file_id)
    if not file:
        raise NotFound("File not found")
    authorize(db, actor_id, file.dataroom_id)
    return file


def get_file_download_url(db: Session, file_id: UUID, *, actor_id: UUID) -> str | None:
    file = get_file(db, file_id, actor_id=actor_id)
    return storage.get_url(file.storage_ref)


def create_file(
    db: Session,
    dataroom_id: UUID,
    folder_id: UUID | None,
    name: str,
    storage_ref: str,
    mime_type: str,
    size: int,
    *,
    actor_id: UUID,
) -> models.File:
    authorize(db, actor_id, dataroom_id, "editor")
    if mime_type != PDF_MIME_TYPE:
        raise InvalidMimeType()
    validate_name(name)
    _require_folder_in_dataroom(db, folder_id, dataroom_id)
    if _file_name_taken(db, dataroom_id, folder_id, name):
        raise DuplicateName("A file with this name already exists")
    # one record per stored object; the blob is released with its record
    if _storage_ref_taken(db, storage_ref):
        raise StorageConflict()
    if not storage.object_exists(storage_ref):
        raise NotFound("Stored object not found")

    now = datetime.now(timezone.utc)
    file = models.File(
        name=name,
        dataroom_id=dataroom_id,
        folder_id=folder_id,
        storage_ref=storage_ref,
        mime_type=mime_type,
        size=size,
        created_at=now,
        updated_at=now,
    )
    db.add(file)
    db.commit()
    db.refresh(file)
    return file


def rename_file(db: Session, file_id: UUID, name: str, *, actor_id: UUID) -> models.File:
    file = db.get(models.File, file_id)
    if not file:
        raise NotFound("File not found")
    authorize(db, actor_id, file.dataroom_id, "editor")
    validate_name(name)
    if _file_name_taken(db, file.dataroom_id, file.folder_id, name, exclude_id=file.id):
        raise DuplicateName("A file with this name already exists")
    file.name = name
    file.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(file)
    return file


def delete_file(db: Session, file_id: UUID, *, actor_id: UUID) -> UUID:
    file = db.get(models.File, file_id)
    if not file:
        raise NotFound("File not found")
    authorize(db, actor_id, file.dataroom_id, "editor")
    storage_ref = file.storage_ref
    db.delete(file)
    storage.delete_object(storage_ref)
    db.commit()
    return file_id


# stored objects


def write_reserved_object(db: Session, object_name: str, data: bytes) -> int:
    """Store the bytes for a freshly reserved key in the local backend.

    A key already registered to a file, or already holding bytes, is never
    overwritten.
    """

    if _storage_ref_taken(db, object_name):
        raise StorageConflict()
    try:
        if storage.object_exists(object_name):
            raise StorageConflict()
        return storage.save_object(object_name, data)
    except FileNotFoundError:
        raise NotFound("Stored object not found")


def read_stored_object(db: Session, object_name: str, *, actor_id: UUID) -> bytes:
    file = db.query(models.File).filter(models.File.storage_ref == object_name).first()
    if not file:
        raise NotFound("Stored object not found")
    authorize(db, actor_id, file.dataroom_id)
    try:
        return storage.load_object(object_name)
    except FileNotFoundError:
        raise NotFound("Stored object not found")
