from fastapi import APIRouter, Depends, HTTPException
from beanie.operators import Set
from typing import List, Optional

from auth.auth_handler import get_current_user, get_current_admin
from models.notification import Notification
from models.user import User, UserRole
from notification.service import notify
from schemas.notification import NotificationCreate, NotificationResponse
from utils.object_ids import to_object_id

router = APIRouter(prefix="/notifications")


async def load_own_notification(notification_id: str, current_user: User) -> Notification:
    notification = await Notification.get(to_object_id(notification_id, "notification ID"))
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    if current_user.role != UserRole.ADMIN and notification.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized to access this notification")
    return notification


@router.get("", response_model=List[NotificationResponse])
async def get_notifications(
    user_id: Optional[str] = None,
    unread_only: bool = False,
    current_user: User = Depends(get_current_user),
):
    owner_id = current_user.id
    if user_id:
        owner_id = to_object_id(user_id, "user ID")
        if current_user.role != UserRole.ADMIN and owner_id != current_user.id:
            raise HTTPException(status_code=403, detail="Not authorized to view these notifications")

    filters = [Notification.user_id == owner_id]
    if unread_only:
        filters.append(Notification.is_read == False)  # noqa: E712
    notifications = await Notification.find(*filters).sort(-Notification.created_at).to_list()
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("", response_model=NotificationResponse, status_code=201)
async def create_notification(
    body: NotificationCreate, current_admin: User = Depends(get_current_admin)
):
    user = await User.get(to_object_id(body.user_id, "user ID"))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    doctor_id = to_object_id(body.doctor_id, "doctor ID") if body.doctor_id else None
    notification = await notify(user.id, body.title, body.message, body.type, doctor_id=doctor_id)
    return NotificationResponse.model_validate(notification)


@router.put("/read-all")
async def mark_all_read(current_user: User = Depends(get_current_user)):
    result = await Notification.find(
        Notification.user_id == current_user.id, Notification.is_read == False  # noqa: E712
    ).update(Set({Notification.is_read: True}))
    return {"msg": "Notifications marked as read", "updated": result.modified_count}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: str, current_user: User = Depends(get_current_user)):
    notification = await load_own_notification(notification_id, current_user)
    notification.is_read = True
    await notification.save()
    return NotificationResponse.model_validate(notification)


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str, current_user: User = Depends(get_current_user)):
    notification = await load_own_notification(notification_id, current_user)
    await notification.delete()
    return {"msg": "Notification deleted"}
