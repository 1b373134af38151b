from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from .. import models, schemas, auth
from ..services import accounts

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=schemas.UserOut)
async def read_profile(current_user: models.User = Depends(auth.get_current_user)):
    return current_user


@router.get("/{user_id}", response_model=schemas.UserOut)
def get_user(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(auth.get_current_user),
):
    return accounts.get_user(db, user_id)
