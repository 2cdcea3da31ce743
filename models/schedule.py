from datetime import datetime, timedelta
from typing import List

from pydantic import BaseModel, field_validator

WEEK_DAYS = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
SLOT_MINUTES = 30
TIME_FORMAT = "%H:%M"


def parse_clock(value: str) -> datetime:
    return datetime.strptime(value, TIME_FORMAT)


class WorkTime(BaseModel):
    day: str
    start_time: str
    end_time: str

    @field_validator("day")
    @classmethod
    def known_day(cls, v):
        day = v.strip().capitalize()
        if day not in WEEK_DAYS:
            raise ValueError(f"day must be one of {', '.join(WEEK_DAYS)}")
        return day

    @field_validator("start_time", "end_time")
    @classmethod
    def clock_time(cls, v):
        return parse_clock(v).strftime(TIME_FORMAT)

    def slots(self) -> List[str]:
        """Start times of every full slot between ``start_time`` and ``end_time``."""
        current = parse_clock(self.start_time)
        end = parse_clock(self.end_time)
        step = timedelta(minutes=SLOT_MINUTES)
        times = []
        while current + step <= end:
            times.append(current.strftime(TIME_FORMAT))
            current += step
        return times


def weekday_name(date_value: str) -> str:
    """Weekday name for an ISO ``YYYY-MM-DD`` date."""
    weekday = datetime.strptime(date_value, "%Y-%m-%d").weekday()
    # datetime counts from Monday, WEEK_DAYS from Sunday
    return WEEK_DAYS[(weekday + 1) % 7]


def available_days(work_times: List[WorkTime]) -> List[dict]:
    days = []
    for day in WEEK_DAYS:
        times = []
        for work_time in work_times:
            if work_time.day == day:
                times.extend(work_time.slots())
        times = sorted(set(times))
        days.append({"day": day, "available": bool(times), "times": times})
    return days
