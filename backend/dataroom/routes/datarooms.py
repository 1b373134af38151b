from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_user
from .. import models, schemas
from ..services import datarooms, tree

router = APIRouter(prefix="/api/datarooms", tags=["datarooms"])


def _with_role(dataroom: models.Dataroom, role: str) -> schemas.DataroomWithRoleOut:
    out = schemas.DataroomOut.model_validate(dataroom)
    return schemas.DataroomWithRoleOut(**out.model_dump(), role=role)


@router.post("", response_model=schemas.DataroomWithRoleOut)
def create_dataroom(
    payload: schemas.DataroomCreate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    dataroom = datarooms.create_dataroom(db, payload.name, actor_id=user.id)
    return _with_role(dataroom, "owner")


@router.get("", response_model=List[schemas.DataroomWithRoleOut])
def list_datarooms(
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return [_with_role(d, role) for d, role in datarooms.list_my_datarooms(db, actor_id=user.id)]


@router.get("/{dataroom_id}", response_model=schemas.DataroomWithRoleOut)
def get_dataroom(
    dataroom_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    dataroom, role = datarooms.get_dataroom(db, dataroom_id, actor_id=user.id)
    return _with_role(dataroom, role)


@router.patch("/{dataroom_id}", response_model=schemas.DataroomOut)
def rename_dataroom(
    dataroom_id: UUID,
    payload: schemas.DataroomUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return datarooms.rename_dataroom(db, dataroom_id, payload.name, actor_id=user.id)


@router.delete("/{dataroom_id}", response_model=schemas.DeleteSummaryOut)
def delete_dataroom(
    dataroom_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    result = datarooms.delete_dataroom(db, dataroom_id, actor_id=user.id)
    return schemas.DeleteSummaryOut(
        id=dataroom_id, folders_deleted=result.folders, files_deleted=result.files
    )


@router.get("/{dataroom_id}/item-count", response_model=schemas.ItemCountOut)
def dataroom_item_count(
    dataroom_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return datarooms.get_dataroom_item_count(db, dataroom_id, actor_id=user.id)


@router.get("/{dataroom_id}/children", response_model=schemas.ChildrenOut)
def list_children(
    dataroom_id: UUID,
    parent_folder_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    folders, files = tree.list_children(db, dataroom_id, parent_folder_id, actor_id=user.id)
    return {"folders": folders, "files": files}
