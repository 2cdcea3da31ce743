from fastapi import HTTPException, Depends, APIRouter
from beanie.operators import In
from typing import List
import logging

from models.user import User, UserRole
from models.doctor_profile import DoctorProfile, ReviewStatus
from models.health_center import HealthCenter
from models.appointment import Appointment, AppointmentStatus
from auth.auth_handler import get_current_admin, hash_password
from schemas.doctor import DoctorAdminResponse
from schemas.user import AccountToggle, UserResponse
from utils.object_ids import to_object_id
import config

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")


@router.get("/dashboard")
async def dashboard(current_admin: User = Depends(get_current_admin)):
    appointments = {
        status.value: await Appointment.find(Appointment.status == status).count()
        for status in AppointmentStatus
    }
    return {
        "patients": await User.find(User.role == UserRole.PATIENT).count(),
        "doctors": await DoctorProfile.find_all().count(),
        "pending_doctors": await DoctorProfile.find(DoctorProfile.status == ReviewStatus.PENDING).count(),
        "approved_doctors": await DoctorProfile.find(DoctorProfile.status == ReviewStatus.APPROVED).count(),
        "featured_doctors": await DoctorProfile.find(DoctorProfile.is_featured == True).count(),  # noqa: E712
        "health_centers": await HealthCenter.find_all().count(),
        "pending_health_centers": await HealthCenter.find(HealthCenter.status == ReviewStatus.PENDING).count(),
        "approved_health_centers": await HealthCenter.find(HealthCenter.status == ReviewStatus.APPROVED).count(),
        "appointments": sum(appointments.values()),
        "appointments_by_status": appointments,
    }


@router.get("/doctors", response_model=List[DoctorAdminResponse])
async def list_all_doctors(current_admin: User = Depends(get_current_admin)):
    profiles = await DoctorProfile.find_all().sort(-DoctorProfile.created_at).to_list()
    users = await User.find(In(User.id, [profile.user_id for profile in profiles])).to_list()
    users_by_id = {user.id: user for user in users}
    return [
        DoctorAdminResponse.build(
            users_by_id[profile.user_id],
            profile,
            id_front=profile.id_front,
            id_back=profile.id_back,
            syndicate_front=profile.syndicate_front,
            syndicate_back=profile.syndicate_back,
        )
        for profile in profiles
        if profile.user_id in users_by_id
    ]


@router.put("/accounts/{id}/toggle", response_model=UserResponse)
async def toggle_account(id: str, body: AccountToggle, current_admin: User = Depends(get_current_admin)):
    user = await User.get(to_object_id(id, "user ID"))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot disable their own account")

    user.is_active = not body.disabled
    user.touch()
    await user.save()
    logger.info(f"Account {user.id} {'disabled' if body.disabled else 'enabled'} by admin {current_admin.id}")
    return UserResponse.model_validate(user)


async def seed_default_admin():
    """Create the configured default admin account when it does not exist yet."""
    if not (config.DEFAULT_ADMIN_EMAIL and config.DEFAULT_ADMIN_PASSWORD):
        return None
    email = config.DEFAULT_ADMIN_EMAIL.lower()
    existing = await User.find_one(User.email == email)
    if existing:
        return existing
    admin = User(
        name="System Admin",
        email=email,
        hashed_password=hash_password(config.DEFAULT_ADMIN_PASSWORD),
        role=UserRole.ADMIN,
    )
    await admin.insert()
    logger.info(f"Created default admin account {email}")
    return admin
