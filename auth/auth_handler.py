from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from bson import ObjectId
from datetime import datetime, timedelta
from typing import Optional

import config
from models.user import User, UserRole

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
bearer_scheme = HTTPBearer(auto_error=False)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user: User, token_type: str, expire_minutes: int) -> str:
    expire = datetime.utcnow() + timedelta(minutes=expire_minutes)
    to_encode = {
        "sub": str(user.id),
        "role": user.role.value,
        "type": token_type,
        "exp": expire,
    }
    return jwt.encode(to_encode, config.JWT_SECRET_KEY, algorithm=config.ALGORITHM)


def create_access_token(user: User) -> str:
    return _create_token(user, ACCESS_TOKEN, config.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_refresh_token(user: User) -> str:
    return _create_token(user, REFRESH_TOKEN, config.REFRESH_TOKEN_EXPIRE_MINUTES)


def decode_token(token: str, token_type: str = ACCESS_TOKEN) -> Optional[str]:
    """Return the account id carried by ``token``, or None when it is unusable."""
    try:
        payload = jwt.decode(token, config.JWT_SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    if payload.get("type") != token_type:
        return None
    user_id = payload.get("sub")
    if user_id is None or not ObjectId.is_valid(user_id):
        return None
    return user_id


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Access token required")
    user_id = decode_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user = await User.get(ObjectId(user_id))
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Admin access required")
    return current_user


def require_roles(*roles: UserRole):
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(status_code=403, detail="Not allowed for this account type")
        return current_user

    return checker
