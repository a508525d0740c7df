import logging
from typing import Annotated, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, Response, status
from pymongo.errors import DuplicateKeyError

from mealbook.core.auth import get_current_user
from mealbook.core.config import settings
from mealbook.core.errors import ConflictError, UnauthorizedError, ValidationError
from mealbook.core.permissions import get_user_permissions
from mealbook.core.security import (
    create_access_token,
    ensure_password_length,
    hash_password,
    verify_password,
)
from mealbook.db.mongo import get_db
from mealbook.models.user import GeneralAccess, SuperAccess, UserInDB
from mealbook.repositories.settings_repo import SettingsRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.auth import (
    AuthMe,
    AuthSession,
    AuthUser,
    LoginRequest,
    LogoutRequest,
    PasswordChange,
    SignupRequest,
    UserCheck,
)
from mealbook.schemas.envelope import ApiResponse
from mealbook.utils.months import MonthKey

logger = logging.getLogger(__name__)

router = APIRouter()


def _start_session(response: Response, user: UserInDB) -> AuthSession:
    access_token = create_access_token(str(user.id))
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    )
    return AuthSession(access_token=access_token, user=AuthUser.from_user(user))


@router.post("", response_model=ApiResponse[Optional[AuthSession]])
async def authenticate(
    response: Response,
    payload: Annotated[
        Union[LoginRequest, SignupRequest, LogoutRequest],
        Body(discriminator="action")
    ],
    db = Depends(get_db)
):
    """Login, signup or logout, selected by ``action``."""
    if isinstance(payload, LoginRequest):
        return ApiResponse(data=await login(response, payload, db))
    if isinstance(payload, SignupRequest):
        response.status_code = status.HTTP_201_CREATED
        return ApiResponse(data=await signup(response, payload, db))

    response.delete_cookie(settings.AUTH_COOKIE_NAME)
    return ApiResponse(data=None)


async def login(response: Response, credentials: LoginRequest, db) -> AuthSession:
    """Login with phone number and password"""
    user_repo = UserRepository(db)

    user = await user_repo.get_user_by_phone(credentials.phone_number, active_only=True)
    if not user or not verify_password(credentials.password, user.password_hash):
        logger.info("Failed login for %s", credentials.phone_number)
        raise UnauthorizedError("Invalid credentials")

    return _start_session(response, user)


async def signup(response: Response, user_data: SignupRequest, db) -> AuthSession:
    """Register a new user; the very first account becomes the super user."""
    ensure_password_length(user_data.password)
    user_repo = UserRepository(db)

    is_first_user = await user_repo.count_users() == 0

    if await user_repo.get_user_by_phone(user_data.phone_number):
        raise ConflictError("Phone number already exists")

    try:
        user = await user_repo.create_user(
            name=user_data.name,
            phone_number=user_data.phone_number,
            password_hash=hash_password(user_data.password),
            access=SuperAccess() if is_first_user else GeneralAccess()
        )
    except DuplicateKeyError:
        raise ConflictError("Phone number already exists")

    logger.info("Registered user %s with role %s", user.id, user.role.value)
    return _start_session(response, user)


@router.get("/me", response_model=ApiResponse[AuthMe])
async def get_current_user_info(
    month: Optional[MonthKey] = Query(None),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Current user and what they may do in ``month`` (defaults to the household's current month)."""
    if month is None:
        month = (await SettingsRepository(db).get_settings()).current_month

    return ApiResponse(data=AuthMe(
        user=AuthUser.from_user(current_user),
        permissions=get_user_permissions(current_user, month),
        month=month
    ))


@router.get("/check-users", response_model=ApiResponse[UserCheck])
async def check_users(db = Depends(get_db)):
    """Whether any account exists yet (the first signup becomes super)."""
    count = await UserRepository(db).count_users()
    return ApiResponse(data=UserCheck(has_users=count > 0))


@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(
    password_data: PasswordChange,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Change user password"""
    ensure_password_length(password_data.new_password, "New password")

    if not verify_password(password_data.current_password, current_user.password_hash):
        raise ValidationError("Current password is incorrect")

    await UserRepository(db).update_user(
        str(current_user.id),
        {"password_hash": hash_password(password_data.new_password)}
    )
    logger.info("Password changed for user %s", current_user.id)
    return ApiResponse(data=None)
