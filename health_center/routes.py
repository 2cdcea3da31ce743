from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from beanie.operators import In
from typing import List, Optional
import logging

from auth.auth_handler import get_current_user, get_current_admin
from auth.routes import create_account
from models.user import User, UserRole
from models.doctor_profile import ReviewStatus
from models.health_center import HealthCenter
from schemas.health_center import HealthCenterCreate, HealthCenterResponse
from utils.cascade import delete_account
from utils.object_ids import to_object_id
from utils.storage import IMAGE_TYPES, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health-centers")


def center_response(center: HealthCenter, user: Optional[User] = None) -> HealthCenterResponse:
    response = HealthCenterResponse.model_validate(center)
    if user is not None:
        response.email = user.email
        response.phone = user.phone
    return response


async def load_center(id: str) -> HealthCenter:
    center = await HealthCenter.get(to_object_id(id, "health center ID"))
    if center is None:
        raise HTTPException(status_code=404, detail="Health center not found")
    return center


@router.post("", response_model=HealthCenterResponse, status_code=201)
async def register_health_center(body: HealthCenterCreate):
    user = await create_account(body.name, body.email, body.password, body.phone, UserRole.CENTER)
    center = HealthCenter(
        user_id=user.id,
        **body.model_dump(exclude={"email", "phone", "password"}),
    )
    await center.insert()
    logger.info(f"Health center {center.id} registered for account {user.id}")
    return center_response(center, user)


@router.get("", response_model=List[HealthCenterResponse])
async def list_health_centers(province: Optional[str] = None):
    filters = [HealthCenter.status == ReviewStatus.APPROVED]
    if province:
        filters.append(HealthCenter.province == province)
    centers = await HealthCenter.find(*filters).to_list()
    users = await User.find(
        In(User.id, [center.user_id for center in centers]), User.is_active == True  # noqa: E712
    ).to_list()
    users_by_id = {user.id: user for user in users}
    return [
        center_response(center, users_by_id[center.user_id])
        for center in centers
        if center.user_id in users_by_id
    ]


@router.get("/{id}", response_model=HealthCenterResponse)
async def get_health_center(id: str):
    center = await load_center(id)
    user = await User.get(center.user_id)
    if center.status != ReviewStatus.APPROVED or user is None or not user.is_active:
        raise HTTPException(status_code=404, detail="Health center not found")
    return center_response(center, user)


@router.post("/{id}/images", response_model=HealthCenterResponse)
async def upload_center_image(
    id: str,
    image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    center = await load_center(id)
    if current_user.role != UserRole.ADMIN and current_user.id != center.user_id:
        raise HTTPException(status_code=403, detail="Not authorized to change this health center")
    center.images.append(await save_upload(image, "center", IMAGE_TYPES))
    await center.save()
    return center_response(center)


async def _review(id: str, status: ReviewStatus) -> HealthCenter:
    center = await load_center(id)
    center.status = status
    await center.save()
    user = await User.get(center.user_id)
    if user is not None:
        user.is_active = status == ReviewStatus.APPROVED
        user.touch()
        await user.save()
    logger.info(f"Health center {center.id} marked {status.value}")
    return center


@router.put("/{id}/approve")
async def approve_health_center(id: str, current_admin: User = Depends(get_current_admin)):
    center = await _review(id, ReviewStatus.APPROVED)
    return {"msg": "Health center approved successfully", "center": center_response(center)}


@router.put("/{id}/reject")
async def reject_health_center(id: str, current_admin: User = Depends(get_current_admin)):
    center = await _review(id, ReviewStatus.REJECTED)
    return {"msg": "Health center rejected successfully", "center": center_response(center)}


@router.delete("/{id}")
async def delete_health_center(id: str, current_admin: User = Depends(get_current_admin)):
    center = await load_center(id)
    user = await User.get(center.user_id)
    if user is not None:
        await delete_account(user)
    else:
        await center.delete()
    return {"msg": "Health center deleted successfully"}
