from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./dataroom.db")

if DATABASE_URL.startswith("sqlite"):
    engine_args = {"connect_args": {"check_same_thread": False, "timeout": 30}}
else:
    engine_args = {"pool_pre_ping": True}

engine = create_engine(DATABASE_URL, **engine_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope():
    """Session for work running outside a request, such as Celery tasks."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
