from pydantic import BaseModel, EmailStr, field_validator, ConfigDict, constr
from enum import Enum
from typing import Optional
from datetime import datetime

from models.user import UserRole
from schemas.common import stringify_object_id


class AccountType(str, Enum):
    """Account types accepted by self-registration. ``user`` is an alias of ``patient``."""

    PATIENT = "patient"
    USER = "user"
    DOCTOR = "doctor"
    CENTER = "center"

    def to_role(self) -> UserRole:
        if self == AccountType.USER:
            return UserRole.PATIENT
        return UserRole(self.value)


class UserCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=2)  # type: ignore
    email: EmailStr
    phone: Optional[str] = None
    password: constr(min_length=8)  # type: ignore
    user_type: AccountType = AccountType.PATIENT

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class UserLogin(BaseModel):
    email: EmailStr
    password: str
    loginType: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class RefreshRequest(BaseModel):
    refresh_token: str


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None


class AccountToggle(BaseModel):
    disabled: bool


class UserResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    profile_image: Optional[str] = None
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return stringify_object_id(v)

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse
