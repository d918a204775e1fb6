"""
Authentication utilities: password hashing, JWT tokens and the
current-user / current-garage dependencies.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.config import get_settings
from garagehub.database import get_db
from garagehub.models.garage import Garage
from garagehub.models.user import User
from garagehub.realtime import commit_and_publish

logger = logging.getLogger(__name__)
settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_prefix}/auth/token")

# bcrypt ignores everything past 72 bytes
MAX_PASSWORD_BYTES = 72


def get_password_hash(password: str) -> str:
    """Hash a password for storing."""
    secret = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash."""
    secret = plain_password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    try:
        return bcrypt.checkpw(secret, hashed_password.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT carrying ``data`` and an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[str]:
    """Return the username carried by ``token``, or None when it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError:
        return None
    return payload.get("sub")


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def authenticate_user(db: AsyncSession, username: str, password: str) -> Optional[User]:
    """Return the user when the credentials match, else None."""
    user = await get_user_by_username(db, username)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


async def get_user_from_token(db: AsyncSession, token: str) -> Optional[User]:
    username = decode_access_token(token)
    if username is None:
        return None
    return await get_user_by_username(db, username)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token into a user."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user = await get_user_from_token(db, token)
    if user is None:
        raise credentials_exception
    return user


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


async def garage_for_user(db: AsyncSession, user: User) -> Garage:
    """The user's garage, created with the default name on first access."""
    result = await db.execute(select(Garage).where(Garage.owner_user_id == user.id))
    garage = result.scalar_one_or_none()
    if garage is None:
        garage = Garage(name=settings.default_garage_name, owner_user_id=user.id)
        db.add(garage)
        await commit_and_publish(db)
        logger.info("Created garage %s for user %s", garage.id, user.username)
    return garage


async def get_current_garage(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
) -> Garage:
    """Tenant of the current request."""
    return await garage_for_user(db, current_user)
