from pydantic import BaseModel, EmailStr, field_validator, ConfigDict, constr
from typing import List, Optional
from datetime import datetime

from models.doctor_profile import ReviewStatus
from models.health_center import CenterService, StaffMember
from models.schedule import WorkTime
from schemas.common import stringify_object_id


class HealthCenterCreate(BaseModel):
    name: constr(strip_whitespace=True, min_length=2)  # type: ignore
    email: EmailStr
    phone: str
    password: constr(min_length=8)  # type: ignore
    type: str = "clinic"
    description: str = ""
    address: str
    province: str
    area: str = ""
    services: List[CenterService] = []
    staff: List[StaffMember] = []
    operating_hours: List[WorkTime] = []

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.lower()


class HealthCenterResponse(BaseModel):
    id: str
    user_id: str
    name: str
    type: str
    description: str
    address: str
    province: str
    area: str
    services: List[CenterService]
    staff: List[StaffMember]
    operating_hours: List[WorkTime]
    images: List[str]
    status: ReviewStatus
    is_featured: bool
    created_at: datetime
    email: Optional[EmailStr] = None
    phone: Optional[str] = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return stringify_object_id(v)

    model_config = ConfigDict(from_attributes=True)
