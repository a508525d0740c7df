import logging
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError

from mealbook.core.auth import get_super_user
from mealbook.core.errors import ConflictError, NotFoundError, ValidationError
from mealbook.core.security import ensure_password_length, hash_password
from mealbook.db.mongo import get_db
from mealbook.models.user import UserAccessUpdate, UserCreate, UserInDB, UserRole, build_access
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.envelope import ApiResponse
from mealbook.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

MANAGER_NEEDS_MONTHS = "Managers must have at least one assigned month"


def _access_for(role: UserRole, assigned_months):
    try:
        return build_access(role, assigned_months)
    except PydanticValidationError:
        raise ValidationError(MANAGER_NEEDS_MONTHS)


@router.get("", response_model=ApiResponse[List[UserResponse]])
async def list_users(
    current_user: UserInDB = Depends(get_super_user),
    db = Depends(get_db)
):
    """All accounts, active or not (super only)."""
    users = await UserRepository(db).list_users()
    return ApiResponse(data=[UserResponse.from_user(u) for u in users])


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    current_user: UserInDB = Depends(get_super_user),
    db = Depends(get_db)
):
    """Create an account on someone's behalf (super only)."""
    user_repo = UserRepository(db)
    access = _access_for(user_in.role, user_in.assigned_months)
    ensure_password_length(user_in.password)

    if await user_repo.get_user_by_phone(user_in.phone_number):
        raise ConflictError(f'Phone number "{user_in.phone_number}" already exists')

    try:
        user = await user_repo.create_user(
            name=user_in.name,
            phone_number=user_in.phone_number,
            password_hash=hash_password(user_in.password),
            access=access,
            email=user_in.email.strip() if user_in.email else None
        )
    except DuplicateKeyError:
        raise ConflictError(f'Phone number "{user_in.phone_number}" already exists')

    logger.info("User %s created by %s with role %s", user.id, current_user.id, user.role.value)
    return ApiResponse(data=UserResponse.from_user(user))


@router.put("", response_model=ApiResponse[UserResponse])
async def update_user_access(
    update: UserAccessUpdate,
    current_user: UserInDB = Depends(get_super_user),
    db = Depends(get_db)
):
    """Change a user's role and assigned months, or (de)activate them (super only)."""
    user_repo = UserRepository(db)
    access = _access_for(update.role, update.assigned_months)

    user = await user_repo.get_user_by_id(update.user_id)
    if user is None:
        raise NotFoundError("User not found")

    losing_super = user.is_super and user.is_active and (
        update.role != UserRole.SUPER or update.is_active is False
    )
    if losing_super and await user_repo.count_active_supers() <= 1:
        raise ValidationError("Cannot remove the last super user")

    changes = {"access": access.model_dump()}
    if update.is_active is not None:
        changes["is_active"] = update.is_active

    updated = await user_repo.update_user(update.user_id, changes)
    if updated is None:
        raise NotFoundError("User not found")

    logger.info(
        "User %s set to role %s (active=%s) by %s",
        updated.id, updated.role.value, updated.is_active, current_user.id
    )
    return ApiResponse(data=UserResponse.from_user(updated))
