from pydantic import BaseModel, field_validator, ConfigDict, constr
from datetime import datetime

from schemas.common import stringify_object_id


class MessageCreate(BaseModel):
    receiver_id: str
    content: constr(strip_whitespace=True, min_length=1)  # type: ignore


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    content: str
    is_read: bool
    timestamp: datetime

    @field_validator("id", "sender_id", "receiver_id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return stringify_object_id(v)

    model_config = ConfigDict(from_attributes=True)
