from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_user
from .. import models
from ..services import tree

router = APIRouter(prefix="/api/storage", tags=["storage"])


@router.put("/objects/{object_name}")
async def upload_object(
    object_name: str,
    request: Request,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    data = await request.body()
    size = tree.write_reserved_object(db, object_name, data)
    return {"storage_ref": object_name, "size": size}


@router.get("/objects/{object_name}")
def download_object(
    object_name: str,
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    data = tree.read_stored_object(db, object_name, actor_id=user.id)
    return Response(content=data, media_type="application/pdf")
