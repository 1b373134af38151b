from .conftest import client, signup, get_headers, create_dataroom, upload_pdf, TestingSessionLocal
from dataroom import models
import uuid


def _folder(client, headers, room_id, name, parent_id=None):
    return client.post(
        f"/api/datarooms/{room_id}/folders",
        json={"name": name, "parent_folder_id": parent_id},
        headers=headers,
    )


def test_create_and_list_folders(client):
    headers = get_headers(client)
    room = create_dataroom(client, headers)
    rid = room["id"]
    b = _folder(client, headers, rid, "B").json()
    a = _folder(client, headers, rid, "A").json()
    _folder(client, headers, rid, "Child", a["id"])

    root = client.get(f"/api/datarooms/{rid}/folders", headers=headers).json()
    assert [f["name"] for f in root] == ["A", "B"]
    assert root[0]["parent_folder_id"] is None

    nested = client.get(
        f"/api/datarooms/{rid}/folders", params={"parent_folder_id": a["id"]}, headers=headers
    ).json()
    assert [f["name"] for f in nested] == ["Child"]

    everything = client.get(f"/api/datarooms/{rid}/folders/all", headers=headers).json()
    assert {f["name"] for f in everything} == {"A", "B", "Child"}

    one = client.get(f"/api/datarooms/{rid}/folders/{b['id']}", headers=headers)
    assert one.status_code == 200
    assert one.json()["name"] == "B"


def test_duplicate_folder_names_scoped_to_parent(client):
    headers = get_headers(client)
    rid = create_dataroom(client, headers)["id"]
    a = _folder(client, headers, rid, "Reports").json()
    dup = _folder(client, headers, rid, "Reports")
    assert dup.status_code == 409
    assert dup.json()["code"] == "DuplicateName"

    assert _folder(client, headers, rid, "Reports", a["id"]).status_code == 200
    assert _folder(client, headers, rid, "Reports", a["id"]).status_code == 409


def test_rename_folder(client):
    headers = get_headers(client)
    rid = create_dataroom(client, headers)["id"]
    a = _folder(client, headers, rid, "A").json()
    _folder(client, headers, rid, "B")

    clash = client.patch(f"/api/folders/{a['id']}", json={"name": "B"}, headers=headers)
    assert clash.status_code == 409
    same = client.patch(f"/api/folders/{a['id']}", json={"name": "A"}, headers=headers)
    assert same.status_code == 200
    renamed = client.patch(f"/api/folders/{a['id']}", json={"name": "Archive"}, headers=headers)
    assert renamed.json()["name"] == "Archive"

    bad = client.patch(f"/api/folders/{a['id']}", json={"name": "a/b"}, headers=headers)
    assert bad.status_code == 400
    assert bad.json()["code"] == "InvalidName"


def test_parent_must_belong_to_dataroom(client):
    headers = get_headers(client)
    first = create_dataroom(client, headers)["id"]
    second = create_dataroom(client, headers)["id"]
    foreign = _folder(client, headers, first, "Elsewhere").json()

    resp = _folder(client, headers, second, "Child", foreign["id"])
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Parent folder not found"


def test_viewer_cannot_create_folders(client):
    owner = get_headers(client)
    viewer_headers, viewer = signup(client)
    rid = create_dataroom(client, owner)["id"]
    client.post(
        f"/api/datarooms/{rid}/access",
        json={"user_email": viewer["email"], "role": "viewer"},
        headers=owner,
    )
    resp = _folder(client, viewer_headers, rid, "Nope")
    assert resp.status_code == 403
    assert resp.json()["code"] == "InsufficientPermissions"
    assert client.get(f"/api/datarooms/{rid}/folders", headers=viewer_headers).status_code == 200


def test_breadcrumbs(client):
    headers = get_headers(client)
    rid = create_dataroom(client, headers)["id"]
    top = _folder(client, headers, rid, "Top").json()
    mid = _folder(client, headers, rid, "Mid", top["id"]).json()
    leaf = _folder(client, headers, rid, "Leaf", mid["id"]).json()

    crumbs = client.get(f"/api/datarooms/{rid}/folders/{leaf['id']}/breadcrumbs", headers=headers).json()
    assert crumbs == [
        {"id": top["id"], "name": "Top"},
        {"id": mid["id"], "name": "Mid"},
        {"id": leaf["id"], "name": "Leaf"},
    ]

    root = client.get(f"/api/datarooms/{rid}/folders/{top['id']}/breadcrumbs", headers=headers).json()
    assert root == [{"id": top["id"], "name": "Top"}]

    unknown = client.get(f"/api/datarooms/{rid}/folders/{uuid.uuid4()}/breadcrumbs", headers=headers)
    assert unknown.json() == []


def test_breadcrumbs_stop_on_cycle(client):
    headers, user = signup(client)
    rid = create_dataroom(client, headers)["id"]
    a = _folder(client, headers, rid, "A").json()
    b = _folder(client, headers, rid, "B", a["id"]).json()

    db = TestingSessionLocal()
    try:
        folder_a = db.get(models.Folder, uuid.UUID(a["id"]))
        folder_a.parent_folder_id = uuid.UUID(b["id"])
        db.commit()
    finally:
        db.close()

    crumbs = client.get(f"/api/datarooms/{rid}/folders/{b['id']}/breadcrumbs", headers=headers).json()
    assert [c["name"] for c in crumbs] == ["A", "B"]


def test_folder_item_count(client):
    headers = get_headers(client)
    rid = create_dataroom(client, headers)["id"]
    parent = _folder(client, headers, rid, "Parent").json()
    child = _folder(client, headers, rid, "Child", parent["id"]).json()
    _folder(client, headers, rid, "Grandchild", child["id"])
    upload_pdf(client, headers, rid, name="a.pdf", folder_id=parent["id"])
    upload_pdf(client, headers, rid, name="b.pdf", folder_id=child["id"])

    resp = client.get(f"/api/folders/{parent['id']}/item-count", headers=headers)
    assert resp.json() == {"folders": 1, "files": 1, "total": 2}


def test_delete_folder_cascades(client, upload_dir):
    headers = get_headers(client)
    rid = create_dataroom(client, headers)["id"]
    root = _folder(client, headers, rid, "Root").json()
    left = _folder(client, headers, rid, "Left", root["id"]).json()
    right = _folder(client, headers, rid, "Right", root["id"]).json()
    deep = _folder(client, headers, rid, "Deep", left["id"]).json()
    keep = _folder(client, headers, rid, "Keep").json()
    for name, folder in [("r.pdf", root), ("l.pdf", left), ("d.pdf", deep), ("x.pdf", right)]:
        upload_pdf(client, headers, rid, name=name, folder_id=folder["id"])
    kept_file = upload_pdf(client, headers, rid, name="keep.pdf", folder_id=keep["id"])

    resp = client.delete(f"/api/folders/{root['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"id": root["id"], "folders_deleted": 4, "files_deleted": 4}

    remaining = client.get(f"/api/datarooms/{rid}/folders/all", headers=headers).json()
    assert [f["id"] for f in remaining] == [keep["id"]]
    files = client.get(f"/api/datarooms/{rid}/files", params={"folder_id": keep["id"]}, headers=headers).json()
    assert [f["id"] for f in files] == [kept_file["id"]]
    assert [p.name for p in upload_dir.iterdir()] == [kept_file["storage_ref"]]

    crumbs = client.get(f"/api/datarooms/{rid}/folders/{deep['id']}/breadcrumbs", headers=headers)
    assert crumbs.json() == []

    missing = client.delete(f"/api/folders/{root['id']}", headers=headers)
    assert missing.status_code == 404


def test_delete_deep_chain(client):
    headers, user = signup(client)
    rid = create_dataroom(client, headers)["id"]
    depth = 1100

    db = TestingSessionLocal()
    try:
        parent_id = None
        top_id = None
        for i in range(depth):
            folder = models.Folder(name=f"level-{i}", dataroom_id=uuid.UUID(rid), parent_folder_id=parent_id)
            db.add(folder)
            db.flush()
            parent_id = folder.id
            top_id = top_id or folder.id
        db.commit()
    finally:
        db.close()

    crumbs = client.get(f"/api/datarooms/{rid}/folders/{parent_id}/breadcrumbs", headers=headers).json()
    assert len(crumbs) == depth
    assert crumbs[0]["name"] == "level-0"

    resp = client.delete(f"/api/folders/{top_id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["folders_deleted"] == depth
    assert client.get(f"/api/datarooms/{rid}/folders/all", headers=headers).json() == []
