import os
os.environ["TESTING"] = "1"
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import sys
from pathlib import Path
import shutil

import uuid

sys.path.append(str(Path(__file__).resolve().parents[2]))

from dataroom.main import app
from dataroom.database import Base, get_db

SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"]
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def upload_dir(tmp_path):
    d = tmp_path / "uploads"
    d.mkdir()
    os.environ["UPLOAD_DIR"] = str(d)
    yield d
    shutil.rmtree(d, ignore_errors=True)

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def signup(client, *, email: str | None = None, password: str = "secret", full_name: str = ""):
    """Create an account and return ``(headers, user json)``."""

    email = email or f"user-{uuid.uuid4()}@example.com"
    resp = client.post(
        "/api/auth/signup",
        json={"email": email, "password": password, "full_name": full_name},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]


def get_headers(client, email: str | None = None):
    headers, _ = signup(client, email=email)
    return headers


def create_dataroom(client, headers, name: str | None = None):
    resp = client.post(
        "/api/datarooms",
        json={"name": name or f"Room {uuid.uuid4().hex[:8]}"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def upload_pdf(client, headers, dataroom_id, name="report.pdf", folder_id=None, content=b"%PDF-1.4 test"):
    """Reserve an object, PUT the bytes to the local store and register the file."""

    target = client.post("/api/files/upload-url", headers=headers).json()
    put = client.put(
        f"/api/storage/objects/{target['storage_ref']}",
        content=content,
        headers={**headers, "Content-Type": "application/pdf"},
    )
    assert put.status_code == 200, put.text
    resp = client.post(
        f"/api/datarooms/{dataroom_id}/files",
        json={
            "name": name,
            "folder_id": folder_id,
            "storage_ref": target["storage_ref"],
            "mime_type": "application/pdf",
            "size": len(content),
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()
