from beanie import Document, PydanticObjectId
from pydantic import Field
from typing import List, Optional
from datetime import datetime


class MedicineReminder(Document):
    user_id: PydanticObjectId
    medicine_name: str
    dosage: str = ""
    times: List[str] = []  # HH:MM
    start_date: str  # YYYY-MM-DD
    end_date: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "medicine_reminders"
        indexes = ["user_id"]
