from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field
from pymongo import ASCENDING, IndexModel
from typing import List, Optional
from datetime import datetime

from models.doctor_profile import ReviewStatus
from models.schedule import WorkTime


class CenterService(BaseModel):
    name: str
    price: Optional[float] = None
    description: str = ""


class StaffMember(BaseModel):
    name: str
    role: str = ""
    specialty: str = ""


class HealthCenter(Document):
    user_id: PydanticObjectId
    name: str
    type: str = "clinic"
    description: str = ""
    address: str = ""
    province: str = ""
    area: str = ""
    services: List[CenterService] = []
    staff: List[StaffMember] = []
    operating_hours: List[WorkTime] = []
    images: List[str] = []
    status: ReviewStatus = ReviewStatus.PENDING
    is_featured: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "health_centers"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True, name="unique_center_user"),
            "status",
        ]
