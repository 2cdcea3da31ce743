from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from enum import Enum
from typing import List, Optional
from datetime import datetime

from models.schedule import WorkTime, available_days, weekday_name


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DoctorProfile(Document):
    user_id: PydanticObjectId
    specialty: str = ""
    province: str = ""
    area: str = ""
    clinic_location: str = ""
    about: str = ""
    experience_years: Optional[int] = None
    consultation_fee: Optional[float] = None
    work_times: List[WorkTime] = []
    id_front: Optional[str] = None
    id_back: Optional[str] = None
    syndicate_front: Optional[str] = None
    syndicate_back: Optional[str] = None
    status: ReviewStatus = ReviewStatus.PENDING
    is_featured: bool = False
    is_available: bool = True
    rating: float = 0
    total_ratings: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "doctor_profiles"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True, name="unique_doctor_user"),
            "status",
        ]

    def document_paths(self) -> List[str]:
        return [
            path
            for path in (self.id_front, self.id_back, self.syndicate_front, self.syndicate_back)
            if path
        ]

    def available_days(self) -> List[dict]:
        return available_days(self.work_times)

    def offers_slot(self, date: str, time: str) -> bool:
        """A doctor without work times accepts any slot."""
        if not self.work_times:
            return True
        day = weekday_name(date)
        return any(
            work_time.day == day and time in work_time.slots()
            for work_time in self.work_times
        )
