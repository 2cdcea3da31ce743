from pydantic import BaseModel, field_validator, ConfigDict
from typing import Optional
from datetime import datetime

from models.appointment import AppointmentStatus, AppointmentType
from schemas.common import stringify_object_id, validate_clock, validate_date


class AppointmentCreate(BaseModel):
    patient_id: Optional[str] = None
    doctor_id: str
    date: str
    time: str
    type: AppointmentType = AppointmentType.CONSULTATION
    notes: Optional[str] = None
    symptoms: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v):
        try:
            return validate_date(v)
        except ValueError:
            raise ValueError("date must be formatted as YYYY-MM-DD")

    @field_validator("time")
    @classmethod
    def check_time(cls, v):
        try:
            return validate_clock(v)
        except ValueError:
            raise ValueError("time must be formatted as HH:MM")


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
    prescription: Optional[str] = None


class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    date: str
    time: str
    type: AppointmentType
    status: AppointmentStatus
    notes: Optional[str] = None
    symptoms: Optional[str] = None
    prescription: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    patient_name: Optional[str] = None
    doctor_name: Optional[str] = None

    @field_validator("id", "patient_id", "doctor_id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return stringify_object_id(v)

    model_config = ConfigDict(from_attributes=True)
