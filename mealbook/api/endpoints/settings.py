import logging

from fastapi import APIRouter, Depends

from mealbook.core.auth import get_current_user, get_super_user
from mealbook.db.mongo import get_db
from mealbook.models.settings import HouseholdSettings, SettingsUpdate
from mealbook.models.user import UserInDB
from mealbook.repositories.settings_repo import SettingsRepository
from mealbook.schemas.envelope import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=ApiResponse[HouseholdSettings])
async def get_settings(
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    return ApiResponse(data=await SettingsRepository(db).get_settings())


@router.post("", response_model=ApiResponse[HouseholdSettings])
async def update_settings(
    settings_in: SettingsUpdate,
    current_user: UserInDB = Depends(get_super_user),
    db = Depends(get_db)
):
    """Move the household's current month (super only)."""
    updated = await SettingsRepository(db).set_current_month(settings_in.current_month)
    logger.info("Current month set to %s by %s", updated.current_month, current_user.id)
    return ApiResponse(data=updated)
