"""
Authentication routes.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import ValidationError
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from garagehub.auth import (
    authenticate_user, create_access_token, garage_for_user, get_current_active_user, get_password_hash,
)
from garagehub.database import get_db
from garagehub.models.user import User, UserRole
from garagehub.realtime import commit_and_publish
from garagehub.schemas.user import LoginRequest, Token, User as UserSchema, UserCreate

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_for(user: User) -> Token:
    return Token(access_token=create_access_token({"sub": user.username}), token_type="bearer")


async def _login(db: AsyncSession, username: str, password: str) -> Token:
    user = await authenticate_user(db, username, password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return _token_for(user)


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    """
    Register a user. The user becomes the admin of a new garage.
    """
    result = await db.execute(
        select(User).where(or_(User.username == user_in.username, User.email == user_in.email))
    )
    existing = result.scalars().first()
    if existing:
        detail = "Username already registered" if existing.username == user_in.username else "Email already registered"
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

    user = User(
        username=user_in.username,
        email=user_in.email,
        full_name=user_in.full_name,
        hashed_password=get_password_hash(user_in.password),
        role=UserRole.ADMIN,
    )
    db.add(user)
    await commit_and_publish(db)
    await garage_for_user(db, user)
    return user


@router.post("/login", response_model=Token)
async def login(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Log in with a JSON body or a form, and get a bearer token.
    """
    if request.headers.get("content-type", "").startswith("application/json"):
        data = await request.json()
    else:
        data = dict(await request.form())
    try:
        credentials = LoginRequest.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc
    return await _login(db, credentials.username, credentials.password)


@router.post("/token", response_model=Token)
async def token(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    """
    OAuth2 password flow token endpoint (used by the interactive docs).
    """
    return await _login(db, form_data.username, form_data.password)


@router.get("/me", response_model=UserSchema)
async def read_me(current_user: User = Depends(get_current_active_user)):
    """
    Get the current user.
    """
    return current_user
