from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth import get_current_user
from .. import models, schemas
from ..services import search

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("", response_model=List[schemas.SearchResultOut])
def search_all(
    db: Session = Depends(get_db),
    user: models.User = Depends(get_current_user),
):
    return search.search_all(db, actor_id=user.id)
