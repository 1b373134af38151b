from fastapi import APIRouter, Depends, Request
import os
from sqlalchemy.orm import Session
from ..database import get_db
from .. import schemas
from ..auth import create_access_token
from ..services import accounts
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
testing = os.getenv("TESTING") == "1"

def rate_limit(limit: str):
    if testing:
        def wrapper(func):
            return func
        return wrapper
    return limiter.limit(limit)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(user) -> schemas.AuthOut:
    token = create_access_token({"sub": str(user.id)})
    return schemas.AuthOut(access_token=token, user=schemas.UserOut.model_validate(user))


@router.post("/signup", response_model=schemas.AuthOut)
@rate_limit("5/minute")
async def signup(request: Request, payload: schemas.UserCreate, db: Session = Depends(get_db)):
    user = accounts.signup(
        db,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
    )
    return _auth_response(user)


@router.post("/login", response_model=schemas.AuthOut)
@rate_limit("10/minute")
async def login(request: Request, payload: schemas.LoginRequest, db: Session = Depends(get_db)):
    user = accounts.login(db, email=payload.email, password=payload.password)
    return _auth_response(user)
