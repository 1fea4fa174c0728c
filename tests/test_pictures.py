import asyncio
import base64

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from catalog.core.config import settings
from catalog.db.repositories.pictures import PictureRepository
from catalog.features.pictures.services import PictureService
from conftest import make_png


def _upload(client, headers, raw, filename="chaise.png", content_type="image/png", **fields):
    return client.post(
        "/api/pictures/new",
        files={"picture": (filename, raw, content_type)},
        data=fields,
        headers=headers,
    )


def _upload_json(client, headers, raw, filename="chaise.gif", **fields):
    body = {"fileName": filename, "fileData": base64.b64encode(raw).decode(), **fields}
    return client.post("/api/pictures/new", json=body, headers=headers)


# ---------- Création ----------

def test_multipart_upload_stores_file_and_row(client, user_headers, upload_dir, png_bytes):
    res = _upload(client, user_headers, png_bytes, title="Chaise bleue")
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["slug"] == "chaise-bleue"
    assert body["mime_type"] == "image/png"
    assert body["bytes"] == len(png_bytes)
    assert body["file_path"] == f"/uploads/pictures/{body['image_path']}"
    assert res.headers["location"] == f"/api/pictures/{body['id']}"
    assert (upload_dir / body["image_path"]).read_bytes() == png_bytes


def test_base64_upload_round_trip(client, user_headers, upload_dir, gif_bytes):
    res = _upload_json(client, user_headers, gif_bytes, title="Logo", slug="logo-gif")
    assert res.status_code == 201, res.text
    picture = res.json()
    assert picture["slug"] == "logo-gif"
    assert (upload_dir / picture["image_path"]).read_bytes() == gif_bytes

    res = client.get(f"/api/pictures/{picture['id']}")
    assert res.status_code == 200
    assert res.content == gif_bytes
    assert res.headers["content-type"] == "image/gif"


def test_base64_upload_accepts_data_uri(client, user_headers, png_bytes):
    data = "data:image/png;base64," + base64.b64encode(png_bytes).decode()
    res = client.post(
        "/api/pictures/new",
        json={"fileName": "photo.png", "fileData": data},
        headers=user_headers,
    )
    assert res.status_code == 201, res.text
    assert res.json()["slug"] == "photo"


def test_disallowed_type_creates_nothing(client, user_headers, upload_dir):
    res = _upload(client, user_headers, b"#!/bin/sh\necho pwned\n", filename="evil.png")
    assert res.status_code == 400
    assert client.get("/api/pictures").json()["total"] == 0
    assert list(upload_dir.iterdir()) == []


def test_disallowed_extension(client, user_headers, png_bytes):
    res = _upload(client, user_headers, png_bytes, filename="notes.txt", content_type="text/plain")
    assert res.status_code == 400


def test_invalid_json(client, user_headers):
    res = client.post(
        "/api/pictures/new",
        content=b"{not json",
        headers={**user_headers, "Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid JSON data"


def test_missing_file_data_is_invalid_json(client, user_headers):
    res = client.post("/api/pictures/new", json={"fileName": "a.png"}, headers=user_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid JSON data"


def test_invalid_slug(client, user_headers, png_bytes):
    res = _upload(client, user_headers, png_bytes, slug="Pas Valide")
    assert res.status_code == 400
    assert "lowercase" in res.json()["detail"]


def test_title_too_long(client, user_headers, png_bytes):
    res = _upload(client, user_headers, png_bytes, title="x" * 33)
    assert res.status_code == 400


def test_upload_requires_token(client, png_bytes):
    assert _upload(client, {}, png_bytes).status_code == 401


def test_get_unknown_picture(client):
    assert client.get("/api/pictures/999").status_code == 404


# ---------- Échecs disque / base ----------

def test_commit_failure_removes_stored_file(client, user_headers, upload_dir, png_bytes, monkeypatch):
    def failing_save(self, entity, *, commit=True):
        raise SQLAlchemyError("database is locked")

    monkeypatch.setattr(PictureRepository, "save", failing_save)
    res = _upload(client, user_headers, png_bytes)
    assert res.status_code == 500
    assert res.json()["detail"] == "Problème lors de l'enregistrement de l'image."
    assert list(upload_dir.iterdir()) == []
    assert client.get("/api/pictures").json()["total"] == 0


def test_storage_failure_creates_nothing(client, user_headers, upload_dir, png_bytes, monkeypatch):
    def disk_full(src, dst):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("catalog.utils.uploads.os.replace", disk_full)
    res = _upload(client, user_headers, png_bytes)
    assert res.status_code == 500
    assert "écriture" in res.json()["detail"]
    assert list(upload_dir.iterdir()) == []
    assert client.get("/api/pictures").json()["total"] == 0


# ---------- Lecture du corps ----------

def _spy_create_from_upload(monkeypatch):
    seen = {}
    original = PictureService.create_from_upload

    def spy(self, **fields):
        seen["raw_len"] = len(fields["raw"])
        try:
            asyncio.get_running_loop()
            seen["in_event_loop"] = True
        except RuntimeError:
            seen["in_event_loop"] = False
        return original(self, **fields)

    monkeypatch.setattr(PictureService, "create_from_upload", spy)
    return seen


def test_upload_service_runs_in_threadpool(client, user_headers, png_bytes, monkeypatch):
    seen = _spy_create_from_upload(monkeypatch)
    assert _upload(client, user_headers, png_bytes).status_code == 201
    assert seen == {"raw_len": len(png_bytes), "in_event_loop": False}


def test_oversized_multipart_is_read_up_to_limit_only(client, user_headers, upload_dir, png_bytes, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 1)
    limit = 1024 * 1024
    seen = _spy_create_from_upload(monkeypatch)

    res = _upload(client, user_headers, png_bytes + b"\x00" * (2 * limit))
    assert res.status_code == 400
    assert "Taille" in res.json()["detail"]
    assert seen["raw_len"] == limit + 1
    assert list(upload_dir.iterdir()) == []


def test_oversized_base64_is_rejected(client, user_headers, png_bytes, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_MB", 1)
    res = _upload_json(client, user_headers, png_bytes + b"\x00" * (1024 * 1024), filename="gros.png")
    assert res.status_code == 400
    assert "Taille" in res.json()["detail"]


# ---------- Mise à jour ----------

def test_update_replaces_file(client, user_headers, upload_dir, png_bytes):
    first = _upload(client, user_headers, png_bytes, title="Avant").json()

    new_raw = make_png(red=10)
    res = client.put(
        f"/api/pictures/{first['id']}",
        files={"picture": ("apres.png", new_raw, "image/png")},
        data={"title": "Après"},
        headers=user_headers,
    )
    assert res.status_code == 200, res.text
    updated = res.json()
    assert updated["title"] == "Après"
    assert updated["slug"] == "apres"
    assert updated["image_path"] != first["image_path"]
    assert not (upload_dir / first["image_path"]).exists()
    assert (upload_dir / updated["image_path"]).read_bytes() == new_raw


def test_update_title_only_json(client, user_headers, png_bytes):
    first = _upload(client, user_headers, png_bytes, title="Avant").json()
    res = client.put(f"/api/pictures/{first['id']}", json={"title": "Nouveau titre"}, headers=user_headers)
    assert res.status_code == 200
    assert res.json()["slug"] == "nouveau-titre"
    assert res.json()["image_path"] == first["image_path"]


def test_update_without_changes(client, user_headers, png_bytes):
    first = _upload(client, user_headers, png_bytes).json()
    res = client.put(f"/api/pictures/{first['id']}", json={}, headers=user_headers)
    assert res.status_code == 400


# ---------- Suppression ----------

def test_delete_removes_file_and_detaches_products(client, user_headers, upload_dir, png_bytes):
    picture = _upload(client, user_headers, png_bytes).json()
    product = client.post(
        "/api/products",
        json={"title": "Salle", "price": 5, "picture": picture["id"]},
    ).json()
    assert product["picture"]["id"] == picture["id"]

    res = client.delete(f"/api/pictures/{picture['id']}", headers=user_headers)
    assert res.status_code == 204
    assert not (upload_dir / picture["image_path"]).exists()
    assert client.get(f"/api/pictures/{picture['id']}").status_code == 404
    assert client.get(f"/api/products/{product['id']}").json()["picture"] is None


# ---------- Fichiers publics ----------

def test_public_file_route(client, user_headers, png_bytes):
    picture = _upload(client, user_headers, png_bytes).json()
    res = client.get(picture["file_path"])
    assert res.status_code == 200
    assert res.content == png_bytes
    assert res.headers["content-type"] == "image/png"


def test_public_file_route_missing(client):
    assert client.get("/uploads/pictures/nope.png").status_code == 404


def test_public_file_route_rejects_traversal(client, upload_dir):
    (upload_dir.parent / "secret.txt").write_text("top secret")
    res = client.get("/uploads/pictures/..%2Fsecret.txt")
    assert res.status_code == 403


def test_resolve_file_rejects_traversal(upload_dir):
    svc = PictureService(repo=None, product_repo=None, upload_dir=upload_dir)
    with pytest.raises(HTTPException) as exc:
        svc.resolve_file("../secret.txt")
    assert exc.value.status_code == 403
