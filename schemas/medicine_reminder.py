from pydantic import BaseModel, field_validator, ConfigDict, constr
from typing import List, Optional
from datetime import datetime

from schemas.common import stringify_object_id, validate_clock, validate_date


class ReminderFields(BaseModel):
    @field_validator("times", check_fields=False)
    @classmethod
    def check_times(cls, v):
        if v is None:
            return v
        try:
            return sorted({validate_clock(t) for t in v})
        except ValueError:
            raise ValueError("times must be formatted as HH:MM")

    @field_validator("start_date", "end_date", check_fields=False)
    @classmethod
    def check_dates(cls, v):
        if v is None:
            return v
        try:
            return validate_date(v)
        except ValueError:
            raise ValueError("dates must be formatted as YYYY-MM-DD")


class MedicineReminderCreate(ReminderFields):
    medicine_name: constr(strip_whitespace=True, min_length=1)  # type: ignore
    dosage: str = ""
    times: List[str]
    start_date: str
    end_date: Optional[str] = None
    notes: Optional[str] = None


class MedicineReminderUpdate(ReminderFields):
    medicine_name: Optional[str] = None
    dosage: Optional[str] = None
    times: Optional[List[str]] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class MedicineReminderResponse(BaseModel):
    id: str
    user_id: str
    medicine_name: str
    dosage: str
    times: List[str]
    start_date: str
    end_date: Optional[str] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def convert_objectid(cls, v):
        return stringify_object_id(v)

    model_config = ConfigDict(from_attributes=True)
