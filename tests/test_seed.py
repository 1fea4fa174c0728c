from pathlib import Path

import pytest
from sqlmodel import select

from catalog.db.models.categories import Category
from catalog.db.models.products import Product
from catalog.db.models.users import ADMIN_SLOT, ROLE_ADMIN, User
from catalog.db.seed import load_seed_yaml, seed_all
from catalog.security.password import verify_password

SEED_FILE = Path(__file__).resolve().parents[1] / "catalog" / "db" / "seed_data.yaml"


def test_seed_all_loads_bundled_yaml(session):
    seed_all(session, SEED_FILE)

    admin = session.exec(select(User).where(User.admin_slot == ADMIN_SLOT)).one()
    assert admin.email == "admin@example.com"
    assert verify_password("admin-password", admin.hashed_password)

    assert len(session.exec(select(Category)).all()) == 3
    products = session.exec(select(Product)).all()
    assert len(products) == 3
    horizon = next(p for p in products if p.title == "Salle Horizon")
    assert [c.name for c in horizon.categories] == ["Salles de réunion"]


def test_seed_is_idempotent(session):
    seed_all(session, SEED_FILE)
    seed_all(session, SEED_FILE)
    assert len(session.exec(select(Product)).all()) == 3
    assert len(session.exec(select(User)).all()) == 2


def test_seed_keeps_a_single_admin(session, tmp_path):
    seed = tmp_path / "seed.yaml"
    seed.write_text(
        "users:\n"
        "  - {email: a@example.com, password: password-a, roles: [ROLE_ADMIN]}\n"
        "  - {email: b@example.com, password: password-b, roles: [ROLE_ADMIN, ROLE_EMPLOYEE]}\n",
        encoding="utf-8",
    )
    seed_all(session, seed)

    b = session.exec(select(User).where(User.email == "b@example.com")).one()
    assert ROLE_ADMIN not in b.roles
    assert b.roles == ["ROLE_EMPLOYEE"]
    assert b.admin_slot is None


def test_load_seed_yaml_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_seed_yaml(tmp_path / "missing.yaml")

    bad = tmp_path / "list.yaml"
    bad.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_yaml(bad)
