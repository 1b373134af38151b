from .conftest import client, signup, get_headers, create_dataroom, upload_pdf
import uuid


def test_create_and_list_datarooms(client):
    headers = get_headers(client)
    first = create_dataroom(client, headers, "Alpha")
    second = create_dataroom(client, headers, "Beta")
    assert first["role"] == "owner"

    resp = client.get("/api/datarooms", headers=headers)
    assert resp.status_code == 200
    rooms = resp.json()
    assert [r["id"] for r in rooms] == [second["id"], first["id"]]
    assert all(r["role"] == "owner" for r in rooms)

    access = client.get(f"/api/datarooms/{first['id']}/access/me", headers=headers)
    assert access.json() == {"role": "owner"}


def test_owned_name_is_unique_case_insensitively(client):
    headers = get_headers(client)
    create_dataroom(client, headers, "Deals")
    resp = client.post("/api/datarooms", json={"name": "deals"}, headers=headers)
    assert resp.status_code == 409
    assert resp.json()["code"] == "DuplicateName"

    other = get_headers(client)
    assert client.post("/api/datarooms", json={"name": "Deals"}, headers=other).status_code == 200


def test_invalid_dataroom_name(client):
    headers = get_headers(client)
    resp = client.post("/api/datarooms", json={"name": "   "}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "InvalidName"


def test_get_and_rename_dataroom(client):
    owner = get_headers(client)
    room = create_dataroom(client, owner, "Old name")

    resp = client.patch(f"/api/datarooms/{room['id']}", json={"name": "New name"}, headers=owner)
    assert resp.status_code == 200
    assert resp.json()["name"] == "New name"

    fetched = client.get(f"/api/datarooms/{room['id']}", headers=owner)
    assert fetched.json()["name"] == "New name"
    assert fetched.json()["role"] == "owner"

    stranger = get_headers(client)
    denied = client.get(f"/api/datarooms/{room['id']}", headers=stranger)
    assert denied.status_code == 403
    assert denied.json()["code"] == "AccessDenied"


def test_editor_cannot_rename_or_delete(client):
    owner = get_headers(client)
    editor_headers, editor = signup(client)
    room = create_dataroom(client, owner)
    client.post(
        f"/api/datarooms/{room['id']}/access",
        json={"user_email": editor["email"], "role": "editor"},
        headers=owner,
    )
    rename = client.patch(f"/api/datarooms/{room['id']}", json={"name": "x"}, headers=editor_headers)
    assert rename.status_code == 403
    assert rename.json()["code"] == "InsufficientPermissions"
    delete = client.delete(f"/api/datarooms/{room['id']}", headers=editor_headers)
    assert delete.status_code == 403


def test_item_count_is_direct_children_only(client):
    headers = get_headers(client)
    room = create_dataroom(client, headers)
    parent = client.post(
        f"/api/datarooms/{room['id']}/folders", json={"name": "Parent"}, headers=headers
    ).json()
    client.post(
        f"/api/datarooms/{room['id']}/folders",
        json={"name": "Nested", "parent_folder_id": parent["id"]},
        headers=headers,
    )
    upload_pdf(client, headers, room["id"], name="root.pdf")

    resp = client.get(f"/api/datarooms/{room['id']}/item-count", headers=headers)
    assert resp.json() == {"folders": 1, "files": 1, "total": 2}


def test_delete_dataroom_tears_everything_down(client, upload_dir):
    owner = get_headers(client)
    viewer_headers, viewer = signup(client)
    room = create_dataroom(client, owner)
    rid = room["id"]
    client.post(
        f"/api/datarooms/{rid}/access",
        json={"user_email": viewer["email"], "role": "viewer"},
        headers=owner,
    )
    folder = client.post(f"/api/datarooms/{rid}/folders", json={"name": "A"}, headers=owner).json()
    upload_pdf(client, owner, rid, name="in-folder.pdf", folder_id=folder["id"])
    upload_pdf(client, owner, rid, name="at-root.pdf")
    assert len(list(upload_dir.iterdir())) == 2

    resp = client.delete(f"/api/datarooms/{rid}", headers=owner)
    assert resp.status_code == 200
    assert resp.json() == {"id": rid, "folders_deleted": 1, "files_deleted": 2}
    assert list(upload_dir.iterdir()) == []

    assert client.get(f"/api/datarooms/{rid}", headers=owner).status_code == 403
    assert client.get("/api/datarooms", headers=viewer_headers).json() == []


def test_children_listing(client):
    headers = get_headers(client)
    room = create_dataroom(client, headers)
    rid = room["id"]
    folder = client.post(f"/api/datarooms/{rid}/folders", json={"name": "Docs"}, headers=headers).json()
    upload_pdf(client, headers, rid, name="top.pdf")
    upload_pdf(client, headers, rid, name="inner.pdf", folder_id=folder["id"])

    root = client.get(f"/api/datarooms/{rid}/children", headers=headers).json()
    assert [f["name"] for f in root["folders"]] == ["Docs"]
    assert [f["name"] for f in root["files"]] == ["top.pdf"]

    inner = client.get(
        f"/api/datarooms/{rid}/children", params={"parent_folder_id": folder["id"]}, headers=headers
    ).json()
    assert inner["folders"] == []
    assert [f["name"] for f in inner["files"]] == ["inner.pdf"]


def test_unknown_dataroom(client):
    headers = get_headers(client)
    resp = client.get(f"/api/datarooms/{uuid.uuid4()}", headers=headers)
    assert resp.status_code == 403


def test_admin_cannot_delete_dataroom(client):
    owner = get_headers(client)
    admin_headers, admin = signup(client)
    room = create_dataroom(client, owner)
    client.post(
        f"/api/datarooms/{room['id']}/access",
        json={"user_email": admin["email"], "role": "admin"},
        headers=owner,
    )

    resp = client.delete(f"/api/datarooms/{room['id']}", headers=admin_headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "InsufficientPermissions"
    assert client.get(f"/api/datarooms/{room['id']}", headers=owner).status_code == 200
