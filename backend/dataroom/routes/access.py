from typing import List
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_user
from ..errors import AccessDenied
from .. import models, schemas
from ..services import access

router = APIRouter(prefix="/api", tags=["access"])


@router.post("/datarooms/{dataroom_id}/access", response_model=schemas.AccessOut)
def invite_user(
    dataroom_id: UUID,
    payload: schemas.AccessInvite,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return access.invite(
        db,
        dataroom_id,
        payload.user_email,
        payload.role,
        actor_id=user.id,
        background_tasks=background_tasks,
    )


@router.get("/datarooms/{dataroom_id}/access", response_model=List[schemas.AccessOut])
def list_access(
    dataroom_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return access.list_access(db, dataroom_id, actor_id=user.id)


@router.get("/datarooms/{dataroom_id}/access/me", response_model=schemas.AccessCheckOut)
def check_my_access(
    dataroom_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    grant = access.check_access(db, user.id, dataroom_id)
    if not grant:
        raise AccessDenied()
    return {"role": grant.role}


@router.patch("/access/{access_id}", response_model=schemas.AccessOut)
def update_access_role(
    access_id: UUID,
    payload: schemas.AccessRoleUpdate,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return access.update_role(db, access_id, payload.role, actor_id=user.id)


@router.delete("/access/{access_id}")
def remove_access(
    access_id: UUID,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    removed_id = access.revoke(db, access_id, actor_id=user.id)
    return {"id": str(removed_id)}
