from datetime import datetime
from sqlmodel import SQLModel
from pydantic import EmailStr, field_validator
from typing import Optional

from models import Role


class LoginSchema(SQLModel):
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class SignupSchema(LoginSchema):
    full_name: str

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v


class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"


class ProfileReadSchema(SQLModel):
    id: int
    full_name: str
    email: EmailStr
    role: Role
    avatar_url: Optional[str] = None
    is_active: bool = True
    created_at: datetime


class ProfileUpdateSchema(SQLModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    avatar_url: Optional[str] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_name(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class PasswordChangeSchema(SQLModel):
    new_password: str
    confirm_password: str


class RoleUpdateSchema(SQLModel):
    role: Role
