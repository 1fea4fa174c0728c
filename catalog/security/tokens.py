"""
Access tokens JWT (HS256 par défaut).

Le token ne transporte que l'identité : `sub` (id utilisateur), l'email et les
rôles au moment de la connexion. Les routes protégées relisent toujours
l'utilisateur en base, un rôle retiré prend donc effet immédiatement.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import List, TypedDict

from jose import jwt, JWTError

ACCESS_TOKEN_TYPE = "access"


@dataclass(frozen=True)
class JWTSettings:
    secret: str
    issuer: str = "catalog-api"
    algorithm: str = "HS256"
    access_ttl: timedelta = field(default_factory=lambda: timedelta(minutes=60))

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.access_ttl.total_seconds())


class DecodedToken(TypedDict, total=False):
    iss: str
    sub: str
    email: str
    roles: List[str]
    typ: str
    jti: str
    iat: int
    exp: int


def create_access_token(*, user_id: int, email: str, roles: List[str], settings: JWTSettings) -> str:
    issued_at = datetime.now(timezone.utc)
    claims: DecodedToken = {
        "iss": settings.issuer,
        "sub": str(user_id),
        "email": email,
        "roles": list(roles),
        "typ": ACCESS_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + settings.access_ttl).timestamp()),
    }
    return jwt.encode(claims, settings.secret, algorithm=settings.algorithm)


def decode_token(token: str, settings: JWTSettings) -> DecodedToken:
    """Vérifie signature, expiration et émetteur. Lève JWTError sinon."""
    return jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        options={"verify_aud": False},
    )  # type: ignore[return-value]


__all__ = [
    "ACCESS_TOKEN_TYPE",
    "JWTSettings",
    "DecodedToken",
    "JWTError",
    "create_access_token",
    "decode_token",
]
