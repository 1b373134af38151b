from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_user
from .. import models, schemas
from ..services import tree

router = APIRouter(prefix="/api", tags=["folders"])


@router.get("/datarooms/{dataroom_id}/folders", response_model=List[schemas.FolderOut])
def list_folders(
    dataroom_id: UUID,
    parent_folder_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.list_folders(db, dataroom_id, parent_folder_id, actor_id=user.id)


# registered before /{folder_id} so "all" is not parsed as an id
@router.get("/datarooms/{dataroom_id}/folders/all", response_model=List[schemas.FolderOut])
def list_all_folders(
    dataroom_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.list_all_folders(db, dataroom_id, actor_id=user.id)


@router.get("/datarooms/{dataroom_id}/folders/{folder_id}", response_model=schemas.FolderOut)
def get_folder(
    dataroom_id: UUID,
    folder_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.get_folder(db, folder_id, dataroom_id, actor_id=user.id)


@router.get(
    "/datarooms/{dataroom_id}/folders/{folder_id}/breadcrumbs",
    response_model=List[schemas.BreadcrumbOut],
)
def get_breadcrumbs(
    dataroom_id: UUID,
    folder_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.get_breadcrumb_path(db, folder_id, dataroom_id, actor_id=user.id)


@router.post("/datarooms/{dataroom_id}/folders", response_model=schemas.FolderOut)
def create_folder(
    dataroom_id: UUID,
    payload: schemas.FolderCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.create_folder(
        db, dataroom_id, payload.parent_folder_id, payload.name, actor_id=user.id
    )


@router.patch("/folders/{folder_id}", response_model=schemas.FolderOut)
def rename_folder(
    folder_id: UUID,
    payload: schemas.FolderRename,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.rename_folder(db, folder_id, payload.name, actor_id=user.id)


@router.delete("/folders/{folder_id}", response_model=schemas.DeleteSummaryOut)
def delete_folder(
    folder_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    result = tree.delete_folder(db, folder_id, actor_id=user.id)
    return schemas.DeleteSummaryOut(
        id=folder_id, folders_deleted=result.folders, files_deleted=result.files
    )


@router.get("/folders/{folder_id}/item-count", response_model=schemas.ItemCountOut)
def folder_item_count(
    folder_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return tree.get_folder_item_count(db, folder_id, actor_id=user.id)
