import logging

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from typing import List, Optional

from models.user import User, UserRole
from schemas.user import ProfileUpdate, UserResponse
from auth.auth_handler import get_current_user, get_current_admin
from utils.cascade import delete_account
from utils.object_ids import to_object_id
from utils.storage import IMAGE_TYPES, delete_upload, save_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users")


@router.put("/me", response_model=UserResponse)
async def update_profile(
    update_data: ProfileUpdate, current_user: User = Depends(get_current_user)
):
    if update_data.name:
        current_user.name = update_data.name
    if update_data.phone:
        current_user.phone = update_data.phone

    current_user.touch()
    await current_user.save()
    return UserResponse.model_validate(current_user)


@router.post("/me/profile-image")
async def upload_profile_image(
    profile_image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
):
    image_path = await save_upload(profile_image, "profileImage", IMAGE_TYPES)
    previous = current_user.profile_image
    current_user.profile_image = image_path
    current_user.touch()
    await current_user.save()
    delete_upload(previous)
    return {"msg": "Profile image uploaded successfully", "image_path": image_path}


@router.get("", response_model=List[UserResponse])
async def list_users(
    role: Optional[UserRole] = None,
    skip: int = 0,
    limit: int = 100,
    current_admin: User = Depends(get_current_admin),
):
    query = User.find(User.role == role) if role else User.find_all()
    users = await query.sort(-User.created_at).skip(skip).limit(limit).to_list()
    return [UserResponse.model_validate(user) for user in users]


@router.delete("/{id}")
async def delete_user(id: str, current_admin: User = Depends(get_current_admin)):
    user = await User.get(to_object_id(id, "user ID"))
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_admin.id:
        raise HTTPException(status_code=400, detail="Admins cannot delete their own account")

    removed = await delete_account(user)
    return {"msg": "User deleted successfully", "deleted_appointments": removed}
