import logging

from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from schemas.user import UserCreate, UserLogin, UserResponse, RefreshRequest, TokenResponse, AccountType
from models.user import User, UserRole
from models.doctor_profile import DoctorProfile
from models.health_center import HealthCenter
from auth.auth_handler import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    decode_token,
    get_current_user,
    hash_password,
    verify_password,
)
from beanie import PydanticObjectId

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")

# loginType values sent by the clients, mapped onto account roles
LOGIN_TYPES = {
    "user": UserRole.PATIENT,
    "patient": UserRole.PATIENT,
    "doctor": UserRole.DOCTOR,
    "admin": UserRole.ADMIN,
    "center": UserRole.CENTER,
}


async def create_account(name: str, email: str, password: str, phone, role: UserRole) -> User:
    """Insert a new account; the unique email index turns a duplicate into 409."""
    if await User.find_one(User.email == email):
        raise HTTPException(status_code=409, detail="Email already registered")
    user = User(
        name=name,
        email=email,
        phone=phone,
        hashed_password=hash_password(password),
        role=role,
    )
    try:
        await user.insert()
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail="Email already registered")
    return user


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(user: UserCreate):
    role = user.user_type.to_role()
    new_user = await create_account(user.name, user.email, user.password, user.phone, role)

    # Doctors and centers start with an empty profile awaiting admin review
    if user.user_type == AccountType.DOCTOR:
        await DoctorProfile(user_id=new_user.id).insert()
    elif user.user_type == AccountType.CENTER:
        await HealthCenter(user_id=new_user.id, name=new_user.name).insert()

    logger.info(f"Registered {role.value} account {new_user.id}")
    return UserResponse.model_validate(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(user: UserLogin):
    expected_role = None
    if user.loginType:
        expected_role = LOGIN_TYPES.get(user.loginType.lower())
        if expected_role is None:
            raise HTTPException(status_code=400, detail="Unknown login type")

    db_user = await User.find_one(User.email == user.email)
    if not db_user or not verify_password(user.password, db_user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if expected_role is not None and db_user.role != expected_role:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not db_user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")

    logger.info(f"Login for {db_user.role.value} account {db_user.id}")
    return TokenResponse(
        access_token=create_access_token(db_user),
        refresh_token=create_refresh_token(db_user),
        user=UserResponse.model_validate(db_user),
    )


@router.post("/refresh")
async def refresh(body: RefreshRequest):
    user_id = decode_token(body.refresh_token, REFRESH_TOKEN)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Refresh token missing or invalid")
    db_user = await User.get(PydanticObjectId(user_id))
    if db_user is None or not db_user.is_active:
        raise HTTPException(status_code=401, detail="Refresh token missing or invalid")
    return {"access_token": create_access_token(db_user), "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
