from beanie import Document, PydanticObjectId
from pydantic import Field
from datetime import datetime


class Message(Document):
    sender_id: PydanticObjectId
    receiver_id: PydanticObjectId
    content: str
    is_read: bool = False
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "messages"
