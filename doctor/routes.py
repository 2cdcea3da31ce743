from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, UploadFile, File, Form
from beanie.operators import In
from pydantic import EmailStr, ValidationError, TypeAdapter
from typing import List, Optional
import json
import logging

import config
from auth.auth_handler import get_current_user, get_current_admin
from auth.routes import create_account
from models.user import User, UserRole
from models.doctor_profile import DoctorProfile, ReviewStatus
from models.schedule import WorkTime
from schemas.doctor import DoctorResponse, DoctorDetailResponse, WorkTimesUpdate
from utils.cascade import delete_account
from utils.email_utils import send_doctor_application_email
from utils.object_ids import to_object_id
from utils.storage import DOCUMENT_TYPES, IMAGE_TYPES, delete_upload, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctors")

DOCUMENT_FIELDS = ("id_front", "id_back", "syndicate_front", "syndicate_back")


async def load_doctor(id: str):
    user = await User.get(to_object_id(id, "doctor ID"))
    if user is None or user.role != UserRole.DOCTOR:
        raise HTTPException(status_code=404, detail="Doctor not found")
    profile = await DoctorProfile.find_one(DoctorProfile.user_id == user.id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return user, profile


def parse_email(raw: str) -> str:
    try:
        return TypeAdapter(EmailStr).validate_python(raw.strip()).lower()
    except ValidationError:
        raise HTTPException(status_code=400, detail="A valid email is required")


def parse_work_times(raw: Optional[str]) -> List[WorkTime]:
    if not raw:
        return []
    try:
        return TypeAdapter(List[WorkTime]).validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError):
        logger.error("Invalid work times in doctor registration")
        raise HTTPException(status_code=400, detail="Invalid work times format")


@router.post("", status_code=201)
async def register_doctor(
    background_tasks: BackgroundTasks,
    name: str = Form(...),
    email: str = Form(...),
    password: str = Form(..., min_length=8),
    phone: str = Form(...),
    specialty: str = Form(...),
    province: str = Form(...),
    area: str = Form(""),
    clinic_location: str = Form(""),
    about: str = Form(""),
    experience_years: Optional[int] = Form(None),
    consultation_fee: Optional[float] = Form(None),
    work_times: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    id_front: Optional[UploadFile] = File(None),
    id_back: Optional[UploadFile] = File(None),
    syndicate_front: Optional[UploadFile] = File(None),
    syndicate_back: Optional[UploadFile] = File(None),
):
    if not name.strip():
        raise HTTPException(status_code=400, detail="Name is required")
    email = parse_email(email)
    if await User.find_one(User.email == email):
        raise HTTPException(status_code=409, detail="Email already registered")
    schedule = parse_work_times(work_times)

    # Files are validated and stored before any record is written
    stored = {}
    uploads = dict(zip(DOCUMENT_FIELDS, (id_front, id_back, syndicate_front, syndicate_back)))
    try:
        if image is not None:
            stored["image"] = await save_upload(image, "image", IMAGE_TYPES)
        for field, upload in uploads.items():
            if upload is not None:
                stored[field] = await save_upload(upload, field, DOCUMENT_TYPES)
        user = await create_account(name.strip(), email, password, phone, UserRole.DOCTOR)
    except Exception:
        for path in stored.values():
            delete_upload(path)
        raise

    if "image" in stored:
        user.profile_image = stored.pop("image")
        await user.save()

    profile = DoctorProfile(
        user_id=user.id,
        specialty=specialty,
        province=province,
        area=area,
        clinic_location=clinic_location,
        about=about,
        experience_years=experience_years,
        consultation_fee=consultation_fee,
        work_times=schedule,
        **stored,
    )
    await profile.insert()
    logger.info(f"Doctor application submitted for account {user.id}")

    if config.ADMIN_NOTIFY_EMAIL:
        background_tasks.add_task(
            send_doctor_application_email, config.ADMIN_NOTIFY_EMAIL, user.email, user.name
        )

    return {
        "msg": "Doctor registered successfully. The application will be reviewed by an admin.",
        "doctor": DoctorResponse.build(user, profile),
    }


@router.get("", response_model=List[DoctorResponse])
async def get_all_doctors(
    specialty: Optional[str] = None,
    province: Optional[str] = None,
    featured: Optional[bool] = None,
):
    filters = [DoctorProfile.status == ReviewStatus.APPROVED, DoctorProfile.is_available == True]  # noqa: E712
    if specialty:
        filters.append(DoctorProfile.specialty == specialty)
    if province:
        filters.append(DoctorProfile.province == province)
    if featured is not None:
        filters.append(DoctorProfile.is_featured == featured)
    profiles = await DoctorProfile.find(*filters).to_list()

    users = await User.find(
        In(User.id, [profile.user_id for profile in profiles]), User.is_active == True  # noqa: E712
    ).to_list()
    users_by_id = {user.id: user for user in users}

    doctors = [
        DoctorResponse.build(users_by_id[profile.user_id], profile)
        for profile in profiles
        if profile.user_id in users_by_id
    ]
    # Featured doctors first, then best rated
    doctors.sort(key=lambda d: (not d.is_featured, -d.rating, d.name))
    return doctors


@router.get("/{id}", response_model=DoctorDetailResponse)
async def get_doctor_profile(id: str):
    user, profile = await load_doctor(id)
    if profile.status != ReviewStatus.APPROVED or not user.is_active:
        raise HTTPException(status_code=404, detail="Doctor not found")
    return DoctorDetailResponse.build(user, profile, available_days=profile.available_days())


@router.put("/{id}/work-times", response_model=DoctorDetailResponse)
async def update_work_times(
    id: str,
    body: WorkTimesUpdate,
    current_user: User = Depends(get_current_user),
):
    user, profile = await load_doctor(id)
    if current_user.role != UserRole.ADMIN and current_user.id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized to change these work times")

    profile.work_times = body.work_times
    await profile.save()
    logger.info(f"Updated work times for doctor {user.id}")
    return DoctorDetailResponse.build(user, profile, available_days=profile.available_days())


async def _review(id: str, status: ReviewStatus):
    user, profile = await load_doctor(id)
    profile.status = status
    await profile.save()
    user.is_active = status == ReviewStatus.APPROVED
    user.touch()
    await user.save()
    logger.info(f"Doctor {user.id} marked {status.value}")
    return user, profile


@router.put("/{id}/approve")
async def approve_doctor(id: str, current_admin: User = Depends(get_current_admin)):
    user, profile = await _review(id, ReviewStatus.APPROVED)
    return {"msg": "Doctor approved successfully", "doctor": DoctorResponse.build(user, profile)}


@router.put("/{id}/reject")
async def reject_doctor(id: str, current_admin: User = Depends(get_current_admin)):
    user, profile = await _review(id, ReviewStatus.REJECTED)
    return {"msg": "Doctor rejected successfully", "doctor": DoctorResponse.build(user, profile)}


async def _set_featured(id: str, featured: bool):
    user, profile = await load_doctor(id)
    profile.is_featured = featured
    await profile.save()
    return user, profile


@router.put("/{id}/feature")
async def feature_doctor(id: str, current_admin: User = Depends(get_current_admin)):
    user, profile = await _set_featured(id, True)
    return {"msg": "Doctor featured successfully", "doctor": DoctorResponse.build(user, profile)}


@router.put("/{id}/unfeature")
async def unfeature_doctor(id: str, current_admin: User = Depends(get_current_admin)):
    user, profile = await _set_featured(id, False)
    return {"msg": "Doctor unfeatured successfully", "doctor": DoctorResponse.build(user, profile)}


@router.delete("/{id}")
async def delete_doctor(id: str, current_admin: User = Depends(get_current_admin)):
    user, _ = await load_doctor(id)
    removed = await delete_account(user)
    return {"msg": "Doctor deleted successfully", "deleted_appointments": removed}
