from beanie import PydanticObjectId
from typing import Optional

from models.notification import Notification, NotificationType


async def notify(
    user_id: PydanticObjectId,
    title: str,
    message: str,
    type: NotificationType = NotificationType.SYSTEM,
    doctor_id: Optional[PydanticObjectId] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        doctor_id=doctor_id,
        title=title,
        message=message,
        type=type,
    )
    await notification.insert()
    return notification
