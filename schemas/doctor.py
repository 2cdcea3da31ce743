from pydantic import BaseModel, EmailStr
from typing import List, Optional
from datetime import datetime

from models.doctor_profile import DoctorProfile, ReviewStatus
from models.schedule import WorkTime
from models.user import User


class WorkTimesUpdate(BaseModel):
    work_times: List[WorkTime]


class AvailableDay(BaseModel):
    day: str
    available: bool
    times: List[str]


class DoctorResponse(BaseModel):
    """Public view of a doctor: the account merged with its profile."""

    id: str
    name: str
    email: EmailStr
    phone: Optional[str] = None
    image: Optional[str] = None
    specialty: str
    province: str
    area: str
    clinic_location: str
    about: str
    experience_years: Optional[int] = None
    consultation_fee: Optional[float] = None
    work_times: List[WorkTime]
    status: ReviewStatus
    is_featured: bool
    is_available: bool
    is_active: bool
    rating: float
    total_ratings: int
    created_at: datetime

    @classmethod
    def build(cls, user: User, profile: DoctorProfile, **extra):
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            phone=user.phone,
            image=user.profile_image,
            specialty=profile.specialty,
            province=profile.province,
            area=profile.area,
            clinic_location=profile.clinic_location,
            about=profile.about,
            experience_years=profile.experience_years,
            consultation_fee=profile.consultation_fee,
            work_times=profile.work_times,
            status=profile.status,
            is_featured=profile.is_featured,
            is_available=profile.is_available,
            is_active=user.is_active,
            rating=profile.rating,
            total_ratings=profile.total_ratings,
            created_at=profile.created_at,
            **extra,
        )


class DoctorDetailResponse(DoctorResponse):
    available_days: List[AvailableDay]


class DoctorAdminResponse(DoctorResponse):
    id_front: Optional[str] = None
    id_back: Optional[str] = None
    syndicate_front: Optional[str] = None
    syndicate_back: Optional[str] = None
