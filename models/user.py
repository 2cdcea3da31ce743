from beanie import Document
from pydantic import EmailStr, Field
from pymongo import ASCENDING, IndexModel
from enum import Enum
from typing import Optional
from datetime import datetime


class UserRole(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    ADMIN = "admin"
    CENTER = "center"


class User(Document):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    hashed_password: str
    role: UserRole = UserRole.PATIENT
    is_active: bool = True
    profile_image: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "users"
        indexes = [
            IndexModel([("email", ASCENDING)], unique=True, name="unique_email"),
            "role",
        ]

    def touch(self):
        self.updated_at = datetime.utcnow()
