from beanie import Document, PydanticObjectId
from pydantic import Field
from enum import Enum
from typing import Optional
from datetime import datetime


class NotificationType(str, Enum):
    APPOINTMENT = "appointment"
    SYSTEM = "system"
    REMINDER = "reminder"


class Notification(Document):
    user_id: PydanticObjectId
    doctor_id: Optional[PydanticObjectId] = None
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM
    is_read: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "notifications"
        indexes = ["user_id"]
