from pydantic import BaseModel, field_validator, ConfigDict
from typing import Optional
from datetime import datetime

from models.notification import NotificationType
from schemas.common import stringify_object_id


class NotificationCreate(BaseModel):
    user_id: str
    doctor_id: Optional[str] = None
    title: str
    message: str
    type: NotificationType = NotificationType.SYSTEM


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    doctor_id: Optional[str] = None
    title: str
    message: str
    type: NotificationType
    is_read: bool
    created_at: datetime

    @field_validator("id", "user_id", "doctor_id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return stringify_object_id(v)

    model_config = ConfigDict(from_attributes=True)
