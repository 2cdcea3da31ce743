from bson import ObjectId
from datetime import datetime

DATE_FORMAT = "%Y-%m-%d"
CLOCK_FORMAT = "%H:%M"


def stringify_object_id(v):
    if isinstance(v, ObjectId):
        return str(v)
    return v


def validate_date(v: str) -> str:
    """Parse ``v`` and return it zero-padded, so equal dates compare equal in storage."""
    return datetime.strptime(v, DATE_FORMAT).strftime(DATE_FORMAT)


def validate_clock(v: str) -> str:
    return datetime.strptime(v, CLOCK_FORMAT).strftime(CLOCK_FORMAT)
