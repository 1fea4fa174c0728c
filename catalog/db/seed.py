"""
➡️ But : Remplir une base de développement à partir d'un fichier YAML.

Ordre : utilisateurs, catégories, produits (les produits référencent les
catégories par leur `key` YAML). Chaque section est ignorée si la table
contient déjà des lignes.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlmodel import Session, select

from catalog.db.models.users import ADMIN_SLOT, ROLE_ADMIN, ROLE_USER, User
from catalog.db.models.categories import Category
from catalog.db.models.products import Product
from catalog.security.password import hash_password

logger = logging.getLogger(__name__)


# -----------------------------
# YAML loader
# -----------------------------
def load_seed_yaml(seed_path: str | Path) -> Dict[str, Any]:
    path = Path(seed_path)
    if not path.exists():
        raise FileNotFoundError(f"Seed YAML introuvable: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Le YAML de seed doit contenir un objet racine (mapping).")
    return data


def _build_category_key_maps(data: Dict[str, Any]) -> Dict[str, str]:
    """category_key -> Category.name (car Category.key n'existe pas en DB)."""
    categories_yaml: List[Dict[str, Any]] = data.get("categories", [])
    return {c["key"]: c["name"] for c in categories_yaml}


# -----------------------------
# Seed Users
# -----------------------------
def seed_users(session: Session, data: Dict[str, Any]) -> None:
    if session.exec(select(User)).first():
        logger.info("Les utilisateurs existent déjà, aucune insertion effectuée.")
        return

    users: List[Dict[str, Any]] = data.get("users", [])
    admin_taken = False
    for u in users:
        roles = [r for r in u.get("roles", []) if r != ROLE_USER]
        is_admin = ROLE_ADMIN in roles and not admin_taken
        if ROLE_ADMIN in roles and admin_taken:
            logger.warning("ROLE_ADMIN ignoré pour %s: admin déjà présent dans le seed", u["email"])
            roles.remove(ROLE_ADMIN)
        admin_taken = admin_taken or is_admin
        session.add(User(
            email=u["email"].strip().lower(),
            hashed_password=hash_password(u["password"]),
            first_name=u.get("first_name"),
            last_name=u.get("last_name"),
            roles=roles,
            admin_slot=ADMIN_SLOT if is_admin else None,
        ))
    session.commit()
    logger.info("%d utilisateurs insérés.", len(users))


# -----------------------------
# Seed Categories
# -----------------------------
def seed_categories(session: Session, data: Dict[str, Any]) -> None:
    if session.exec(select(Category)).first():
        logger.info("Les catégories existent déjà, aucune insertion effectuée.")
        return

    categories: List[Dict[str, Any]] = data.get("categories", [])
    session.add_all([Category(name=c["name"]) for c in categories])
    session.commit()
    logger.info("%d catégories insérées.", len(categories))


# -----------------------------
# Seed Products
# -----------------------------
def seed_products(session: Session, data: Dict[str, Any]) -> None:
    if session.exec(select(Product)).first():
        logger.info("Les produits existent déjà, aucune insertion effectuée.")
        return

    category_names = _build_category_key_maps(data)
    by_name = {c.name: c for c in session.exec(select(Category)).all()}

    products: List[Dict[str, Any]] = data.get("products", [])
    for p in products:
        product = Product(
            title=p["title"],
            description=p.get("description", ""),
            price=p.get("price", 0),
            availability=p.get("availability", True),
        )
        product.categories = [
            by_name[category_names[key]]
            for key in p.get("category_keys", [])
            if key in category_names and category_names[key] in by_name
        ]
        session.add(product)
    session.commit()
    logger.info("%d produits insérés.", len(products))


def seed_all(session: Session, seed_path: str | Path) -> None:
    data = load_seed_yaml(seed_path)
    seed_users(session, data)
    seed_categories(session, data)
    seed_products(session, data)
