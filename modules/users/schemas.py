"""Request payloads of the users module."""
import re
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

TOKEN_RULE = re.compile(r"^[0-9a-fA-F]{64}$")
PASSWORD_RULE = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[^A-Za-z0-9]).{8,}$")
PASSWORD_MESSAGE = (
    "Le mot de passe doit contenir au moins 8 caractères, une majuscule, "
    "une minuscule, un chiffre et un caractère spécial"
)


def _check_password(value: str, message: str = PASSWORD_MESSAGE) -> str:
    if not PASSWORD_RULE.match(value):
        raise ValueError(message)
    return value


def _check_name(value: str, label: str) -> str:
    value = value.strip()
    if not 2 <= len(value) <= 50:
        raise ValueError(f"Le {label} doit contenir entre 2 et 50 caractères")
    return value


class _EmailPayload(BaseModel):
    email: EmailStr

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class RegisterPayload(_EmailPayload):
    password: str
    firstName: str
    lastName: str

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("firstName")
    @classmethod
    def first_name_length(cls, v: str) -> str:
        return _check_name(v, "prénom")

    @field_validator("lastName")
    @classmethod
    def last_name_length(cls, v: str) -> str:
        return _check_name(v, "nom")


class LoginPayload(_EmailPayload):
    password: str


class ForgotPasswordPayload(_EmailPayload):
    pass


class ResetPasswordPayload(BaseModel):
    token: str
    newPassword: str

    @field_validator("token")
    @classmethod
    def hex_token(cls, v: str) -> str:
        if not TOKEN_RULE.match(v):
            raise ValueError("Token invalide")
        return v

    @field_validator("newPassword")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return _check_password(v, "Nouveau mot de passe invalide")


class ProfileUpdatePayload(BaseModel):
    # snake_case keys, as sent by the profile page
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None

    @field_validator("first_name")
    @classmethod
    def first_name_length(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_name(v, "prénom")

    @field_validator("last_name")
    @classmethod
    def last_name_length(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_name(v, "nom")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else v.strip().lower()
