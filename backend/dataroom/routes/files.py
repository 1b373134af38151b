from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_user
from .. import models, schemas, storage
from ..services import tree

router = APIRouter(prefix="/api", tags=["files"])


@router.get("/datarooms/{dataroom_id}/files", response_model=List[schemas.FileOut])
def list_files(
    dataroom_id: UUID,
    folder_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.list_files(db, dataroom_id, folder_id, actor_id=user.id)


@router.post("/datarooms/{dataroom_id}/files", response_model=schemas.FileOut)
def create_file(
    dataroom_id: UUID,
    payload: schemas.FileCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.create_file(
        db,
        dataroom_id,
        payload.folder_id,
        payload.name,
        payload.storage_ref,
        payload.mime_type,
        payload.size,
        actor_id=user.id,
    )


@router.post("/files/upload-url", response_model=schemas.UploadUrlOut)
def generate_upload_url(user: models.User = Depends(get_current_user)):
    storage_ref, upload_url = storage.generate_upload_target()
    return {"upload_url": upload_url, "storage_ref": storage_ref}


@router.get("/files/{file_id}", response_model=schemas.FileOut)
def get_file(
    file_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.get_file(db, file_id, actor_id=user.id)


@router.get("/files/{file_id}/download-url", response_model=schemas.DownloadUrlOut)
def get_download_url(
    file_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return {"url": tree.get_file_download_url(db, file_id, actor_id=user.id)}


@router.patch("/files/{file_id}", response_model=schemas.FileOut)
def rename_file(
    file_id: UUID,
    payload: schemas.FileRename,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.rename_file(db, file_id, payload.name, actor_id=user.id)


@router.delete("/files/{file_id}")
def delete_file(
    file_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    deleted_id = tree.delete_file(db, file_id, actor_id=user.id)
    return {"id": str(deleted_id)}
