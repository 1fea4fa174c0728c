import base64
import hashlib
import re

import pytest

from catalog.utils.uploads import (
    InvalidUpload,
    UnsafePath,
    build_filename,
    check_declared,
    decode_base64,
    remove_file,
    resolve_within,
    store_bytes,
    validate_bytes,
)


# ---------- Type déclaré ----------

def test_check_declared_normalizes_extension():
    assert check_declared("Photo.JPG", "image/jpeg") == "jpg"


def test_check_declared_accepts_image_jpg_alias():
    assert check_declared("photo.jpeg", "image/jpg") == "jpeg"


@pytest.mark.parametrize("filename", ["notes.txt", "archive.tar.gz", "noextension", None])
def test_check_declared_rejects_extension(filename):
    with pytest.raises(InvalidUpload):
        check_declared(filename)


def test_check_declared_rejects_declared_mime():
    with pytest.raises(InvalidUpload):
        check_declared("photo.png", "application/pdf")


# ---------- Base64 ----------

def test_decode_base64_plain_and_data_uri(png_bytes):
    encoded = base64.b64encode(png_bytes).decode()
    assert decode_base64(encoded) == png_bytes
    assert decode_base64(f"data:image/png;base64,{encoded}") == png_bytes


@pytest.mark.parametrize("data", ["", "   ", "@@not-base64@@", "data:image/png;base64,"])
def test_decode_base64_rejects_invalid(data):
    with pytest.raises(InvalidUpload):
        decode_base64(data)


def test_decode_base64_rejects_oversized_before_decoding(monkeypatch):
    def no_decode(*args, **kwargs):
        raise AssertionError("b64decode appelé sur un contenu trop gros")

    monkeypatch.setattr("catalog.utils.uploads.base64.b64decode", no_decode)
    with pytest.raises(InvalidUpload, match="Taille"):
        decode_base64("A" * 16, max_bytes=10)


def test_decode_base64_accepts_exact_limit():
    raw = bytes(range(10))
    assert decode_base64(base64.b64encode(raw).decode(), max_bytes=10) == raw


# ---------- Contenu ----------

def test_validate_bytes_sniffs_real_type(png_bytes):
    mime, ext, size, sha = validate_bytes(png_bytes)
    assert (mime, ext, size) == ("image/png", "png", len(png_bytes))
    assert sha == hashlib.sha256(png_bytes).hexdigest()


def test_validate_bytes_size_limit(png_bytes):
    with pytest.raises(InvalidUpload, match="Taille"):
        validate_bytes(png_bytes, max_bytes=10)


def test_validate_bytes_rejects_text_disguised_as_image():
    with pytest.raises(InvalidUpload, match="Type non autorisé"):
        validate_bytes(b"<?php echo 'hello'; ?>")


def test_validate_bytes_rejects_empty():
    with pytest.raises(InvalidUpload):
        validate_bytes(b"")


# ---------- Noms de fichiers ----------

def test_build_filename_keeps_allowed_extension():
    name = build_filename("Ma Photo.PNG", "png")
    assert re.fullmatch(r"[0-9a-f]+-[0-9a-f]{12}\.png", name)


def test_build_filename_falls_back_to_sniffed_extension():
    assert build_filename("blob", "gif").endswith(".gif")


def test_build_filename_is_unique():
    names = {build_filename("a.png", "png") for _ in range(50)}
    assert len(names) == 50


# ---------- Chemins ----------

@pytest.mark.parametrize("name", ["../secret.txt", "../../etc/passwd", "/etc/passwd", "", ".", "a\x00.png"])
def test_resolve_within_rejects_escape(tmp_path, name):
    with pytest.raises(UnsafePath):
        resolve_within(tmp_path, name)


def test_resolve_within_accepts_plain_name(tmp_path):
    assert resolve_within(tmp_path, "abc.png") == (tmp_path / "abc.png").resolve()


def test_unsafe_path_maps_to_403():
    assert UnsafePath.status_code == 403
    assert InvalidUpload.status_code == 400


def test_store_and_remove_file(tmp_path, png_bytes):
    path = store_bytes(tmp_path, "picture.png", png_bytes)
    assert path.read_bytes() == png_bytes
    # aucun fichier temporaire laissé derrière
    assert [p.name for p in tmp_path.iterdir()] == ["picture.png"]

    assert remove_file(tmp_path, "picture.png") is True
    assert remove_file(tmp_path, "picture.png") is False
    assert remove_file(tmp_path, None) is False
