import logging

from beanie.operators import Or

from models.appointment import Appointment
from models.doctor_profile import DoctorProfile
from models.health_center import HealthCenter
from models.medicine_reminder import MedicineReminder
from models.message import Message
from models.notification import Notification
from models.user import User
from utils.storage import delete_upload

logger = logging.getLogger(__name__)


async def delete_account(user: User) -> int:
    """Delete ``user`` with everything that references it.

    Returns the number of appointments removed.
    """
    uploads = [user.profile_image]

    profile = await DoctorProfile.find_one(DoctorProfile.user_id == user.id)
    if profile:
        uploads.extend(profile.document_paths())
        await profile.delete()

    center = await HealthCenter.find_one(HealthCenter.user_id == user.id)
    if center:
        uploads.extend(center.images)
        await center.delete()

    result = await Appointment.find(
        Or(Appointment.patient_id == user.id, Appointment.doctor_id == user.id)
    ).delete()
    removed = result.deleted_count if result else 0

    await Notification.find(
        Or(Notification.user_id == user.id, Notification.doctor_id == user.id)
    ).delete()
    await Message.find(
        Or(Message.sender_id == user.id, Message.receiver_id == user.id)
    ).delete()
    await MedicineReminder.find(MedicineReminder.user_id == user.id).delete()

    await user.delete()

    for path in uploads:
        delete_upload(path)

    logger.info(f"Deleted account {user.id} ({user.role.value}) and {removed} appointments")
    return removed
