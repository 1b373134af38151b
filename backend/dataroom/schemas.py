from datetime import datetime
from typing import Annotated, Optional, Literal, List
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from uuid import UUID


Role = Literal["owner", "admin", "editor", "viewer"]
InvitableRole = Literal["admin", "editor", "viewer"]


def _check_email(value: str) -> str:
    # emails are stored and matched exactly as entered
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError(str(exc)) from exc
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class UserCreate(BaseModel):
    email: Email
    password: str
    full_name: str = ""


class LoginRequest(BaseModel):
    email: Email
    password: str


class UserOut(BaseModel):
    id: UUID
    email: str
    full_name: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class DataroomCreate(BaseModel):
    name: str


class DataroomUpdate(BaseModel):
    name: str


class DataroomOut(BaseModel):
    id: UUID
    name: str
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class DataroomWithRoleOut(DataroomOut):
    role: Role


class AccessInvite(BaseModel):
    user_email: Email
    role: InvitableRole


class AccessRoleUpdate(BaseModel):
    role: InvitableRole


class AccessOut(BaseModel):
    id: UUID
    dataroom_id: UUID
    user_email: str
    role: Role
    invited_at: datetime
    invited_by: Optional[UUID] = None
    model_config = ConfigDict(from_attributes=True)


class AccessCheckOut(BaseModel):
    role: Role


class FolderCreate(BaseModel):
    name: str
    parent_folder_id: Optional[UUID] = None


class FolderRename(BaseModel):
    name: str


class FolderOut(BaseModel):
    id: UUID
    name: str
    dataroom_id: UUID
    parent_folder_id: Optional[UUID]
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class FileCreate(BaseModel):
    name: str
    folder_id: Optional[UUID] = None
    storage_ref: str
    mime_type: str
    size: int = Field(ge=0)


class FileRename(BaseModel):
    name: str


class FileOut(BaseModel):
    id: UUID
    name: str
    dataroom_id: UUID
    folder_id: Optional[UUID]
    storage_ref: str
    mime_type: str
    size: int
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ChildrenOut(BaseModel):
    folders: List[FolderOut]
    files: List[FileOut]


class ItemCountOut(BaseModel):
    folders: int
    files: int
    total: int


class BreadcrumbOut(BaseModel):
    id: UUID
    name: str


class DeleteSummaryOut(BaseModel):
    id: UUID
    folders_deleted: int = 0
    files_deleted: int = 0


class UploadUrlOut(BaseModel):
    upload_url: str
    storage_ref: str


class DownloadUrlOut(BaseModel):
    url: Optional[str]


class SearchResultOut(BaseModel):
    type: Literal["dataroom", "folder", "file"]
    id: UUID
    name: str
    path: str
    dataroom_id: UUID
    folder_id: Optional[UUID] = None
    role: Optional[Role] = None
