from fastapi import APIRouter, Depends, HTTPException
from typing import List

from auth.auth_handler import get_current_user
from models.medicine_reminder import MedicineReminder
from models.user import User
from schemas.medicine_reminder import (
    MedicineReminderCreate,
    MedicineReminderResponse,
    MedicineReminderUpdate,
)
from utils.object_ids import to_object_id

router = APIRouter(prefix="/medicine-reminders")


async def load_own_reminder(reminder_id: str, current_user: User) -> MedicineReminder:
    reminder = await MedicineReminder.get(to_object_id(reminder_id, "reminder ID"))
    if reminder is None or reminder.user_id != current_user.id:
        raise HTTPException(status_code=404, detail="Reminder not found")
    return reminder


@router.post("", response_model=MedicineReminderResponse, status_code=201)
async def create_reminder(body: MedicineReminderCreate, current_user: User = Depends(get_current_user)):
    if body.end_date and body.end_date < body.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    reminder = MedicineReminder(user_id=current_user.id, **body.model_dump())
    await reminder.insert()
    return MedicineReminderResponse.model_validate(reminder)


@router.get("", response_model=List[MedicineReminderResponse])
async def list_reminders(active_only: bool = False, current_user: User = Depends(get_current_user)):
    filters = [MedicineReminder.user_id == current_user.id]
    if active_only:
        filters.append(MedicineReminder.is_active == True)  # noqa: E712
    reminders = await MedicineReminder.find(*filters).sort(-MedicineReminder.created_at).to_list()
    return [MedicineReminderResponse.model_validate(r) for r in reminders]


@router.put("/{reminder_id}", response_model=MedicineReminderResponse)
async def update_reminder(
    reminder_id: str,
    body: MedicineReminderUpdate,
    current_user: User = Depends(get_current_user),
):
    reminder = await load_own_reminder(reminder_id, current_user)
    for field, value in body.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(reminder, field, value)
    if reminder.end_date and reminder.end_date < reminder.start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    await reminder.save()
    return MedicineReminderResponse.model_validate(reminder)


@router.delete("/{reminder_id}")
async def delete_reminder(reminder_id: str, current_user: User = Depends(get_current_user)):
    reminder = await load_own_reminder(reminder_id, current_user)
    await reminder.delete()
    return {"msg": "Reminder deleted"}
