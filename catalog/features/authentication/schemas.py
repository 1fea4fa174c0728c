from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def _normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


# ---------- Inputs ----------

class RegistrationIn(BaseModel):
    email: str = Field(min_length=3, max_length=180, pattern=EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=128)
    first_name: Optional[str] = Field(None, max_length=64)
    last_name: Optional[str] = Field(None, max_length=64)
    # seul ROLE_ADMIN (premier compte) a un effet à l'inscription
    roles: List[str] = Field(default_factory=list)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class LoginIn(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class AccountEditIn(BaseModel):
    email: Optional[str] = Field(None, min_length=3, max_length=180, pattern=EMAIL_PATTERN)
    password: Optional[str] = Field(None, min_length=8, max_length=128)
    first_name: Optional[str] = Field(None, max_length=64)
    last_name: Optional[str] = Field(None, max_length=64)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class AssignRoleIn(BaseModel):
    email: str
    roles: List[str]

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


# ---------- Outputs ----------

class TokenOut(BaseModel):
    user: str               # email
    access_token: str
    token_type: str = "bearer"
    expires_in: int         # secondes
    roles: List[str]
