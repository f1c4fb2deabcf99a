from datetime import datetime
from enum import Enum
import re
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.utils import ensure_utc

_FULL_NAME_RE = re.compile(r"^[a-zA-Z\s]+$")


class UserRole(str, Enum):
    user = "user"
    admin = "admin"


class UserInDB(BaseModel):
    """Full user document as stored in MongoDB."""
    model_config = {"use_enum_values": True}

    email: EmailStr
    hashed_password: str
    full_name: str
    username: Optional[str] = None
    role: UserRole = UserRole.user
    is_active: bool = True
    # Absent balance means the account is not balance-tracked
    balance: Optional[float] = None
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Request body for self-registration."""
    full_name: str = Field(alias="fullName")
    email: EmailStr
    password: str

    model_config = {"populate_by_name": True}

    @field_validator("full_name")
    @classmethod
    def full_name_format(cls, v: str) -> str:
        v = v.strip()
        if not 2 <= len(v) <= 50:
            raise ValueError("Full name must be between 2 and 50 characters")
        if not _FULL_NAME_RE.match(v):
            raise ValueError("Full name can only contain letters and spaces")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 3:
            raise ValueError("Password must be at least 3 characters long")
        return v


class UserLogin(BaseModel):
    """Request body for login."""
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class AdminUserCreate(BaseModel):
    """Request body for admin-created accounts."""
    username: str = Field(min_length=3, max_length=30)
    password: str = Field(min_length=6)
    type: Literal["Admin", "Master", "User"] = "User"
    full_name: Optional[str] = Field(default=None, alias="fullName", min_length=2, max_length=50)
    is_active: bool = Field(default=True, alias="isActive")
    balance: Optional[float] = Field(default=None, ge=0)

    model_config = {"populate_by_name": True}

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


def user_to_response(user: dict) -> dict:
    """Public user view (never includes the password hash)."""
    out = {
        "id": str(user["_id"]),
        "fullName": user.get("full_name"),
        "username": user.get("username"),
        "email": user.get("email"),
        "role": user.get("role", UserRole.user.value),
        "isActive": user.get("is_active", True),
        "lastLogin": ensure_utc(user["last_login"]) if user.get("last_login") else None,
        "createdAt": ensure_utc(user["created_at"]) if user.get("created_at") else None,
    }
    if user.get("balance") is not None:
        out["balance"] = user["balance"]
    return out
