from beanie import Document, PydanticObjectId
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from typing import Optional
from enum import Enum
from datetime import datetime


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class AppointmentType(str, Enum):
    CONSULTATION = "consultation"
    FOLLOW_UP = "follow-up"
    NORMAL = "normal"


ALLOWED_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.COMPLETED: set(),
}


class Appointment(Document):
    patient_id: PydanticObjectId
    doctor_id: PydanticObjectId
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    type: AppointmentType = AppointmentType.CONSULTATION
    status: AppointmentStatus = AppointmentStatus.PENDING
    # Set to the appointment id once cancelled so the slot can be booked again
    slot_release: Optional[str] = None
    notes: Optional[str] = None
    symptoms: Optional[str] = None
    prescription: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "appointments"  # MongoDB collection name
        indexes = [
            IndexModel(
                [
                    ("doctor_id", ASCENDING),
                    ("date", ASCENDING),
                    ("time", ASCENDING),
                    ("slot_release", ASCENDING),
                ],
                unique=True,
                name="unique_active_slot",
            ),
            "patient_id",
        ]

    def can_transition_to(self, status: AppointmentStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    async def set_status(self, status: AppointmentStatus, prescription: Optional[str] = None):
        self.status = status
        if status == AppointmentStatus.CANCELLED:
            self.slot_release = str(self.id)
        if prescription is not None:
            self.prescription = prescription
        self.updated_at = datetime.utcnow()
        await self.save()
