import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    BigInteger,
)
from sqlalchemy.dialects.postgresql import UUID

from .database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    full_name = Column(String, nullable=False, default="")
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Dataroom(Base):
    __tablename__ = "datarooms"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow)


class DataroomAccess(Base):
    """Grant of a role on one dataroom to one email address."""

    __tablename__ = "dataroom_access"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    dataroom_id = Column(UUID(as_uuid=True), ForeignKey("datarooms.id"), nullable=False, index=True)
    # emails are not foreign keys: invitees may not have signed up yet
    user_email = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)  # "owner", "admin", "editor", "viewer"
    invited_at = Column(DateTime(timezone=True), default=utcnow)
    invited_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    __table_args__ = (
        sa.Index("ix_dataroom_access_dataroom_email", "dataroom_id", "user_email"),
    )


class Folder(Base):
    __tablename__ = "folders"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    dataroom_id = Column(UUID(as_uuid=True), ForeignKey("datarooms.id"), nullable=False, index=True)
    parent_folder_id = Column(UUID(as_uuid=True), ForeignKey("folders.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        sa.Index("ix_folders_dataroom_parent", "dataroom_id", "parent_folder_id"),
    )


class File(Base):
    __tablename__ = "files"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    dataroom_id = Column(UUID(as_uuid=True), ForeignKey("datarooms.id"), nullable=False, index=True)
    folder_id = Column(UUID(as_uuid=True), ForeignKey("folders.id"), nullable=True, index=True)
    storage_ref = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    size = Column(BigInteger, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        sa.Index("ix_files_dataroom_folder", "dataroom_id", "folder_id"),
    )
