import os

os.environ.setdefault("ENV", "test")

import struct
import zlib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from catalog.main import app
from catalog.db.session import enable_sqlite_foreign_keys, get_session
from catalog.api.v1.dependencies import get_upload_dir

GIF_1X1 = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff"
    b"!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
)


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def make_png(red: int = 255) -> bytes:
    """PNG 1x1 valide ; `red` permet d'obtenir des contenus différents."""
    ihdr = struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0)
    idat = zlib.compress(bytes([0, red, 0, 0]))
    return b"\x89PNG\r\n\x1a\n" + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IDAT", idat) + _png_chunk(b"IEND", b"")


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr("catalog.security.password.BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "pictures"
    path.mkdir()
    return path


@pytest.fixture
def client(engine, upload_dir):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_upload_dir] = lambda: upload_dir
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def png_bytes():
    return make_png()


@pytest.fixture
def gif_bytes():
    return GIF_1X1


# -----------------------------
# Helpers comptes
# -----------------------------
@pytest.fixture
def register(client):
    def _register(email, password="secret-pass", roles=None, **extra):
        body = {"email": email, "password": password, **extra}
        if roles is not None:
            body["roles"] = roles
        return client.post("/api/registration", json=body)
    return _register


@pytest.fixture
def login_headers(client):
    def _login(email, password="secret-pass"):
        res = client.post("/api/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['access_token']}"}
    return _login


@pytest.fixture
def admin_headers(register, login_headers):
    assert register("admin@example.com", roles=["ROLE_ADMIN"]).status_code == 201
    return login_headers("admin@example.com")


@pytest.fixture
def user_headers(register, login_headers):
    assert register("client@example.com").status_code == 201
    return login_headers("client@example.com")
