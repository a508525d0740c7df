from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from mealbook.core.auth import get_current_user
from mealbook.core.errors import ValidationError
from mealbook.db.mongo import get_db
from mealbook.models.base import to_object_id
from mealbook.models.ledger import MealBatch, MealUpdate
from mealbook.models.user import UserInDB
from mealbook.repositories.meal_repo import MealRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.envelope import ApiResponse
from mealbook.schemas.ledger import MealBatchResult, MealResponse
from mealbook.services.ledger_service import LedgerService, apply_meal_batch
from mealbook.utils.months import MonthKey

router = APIRouter()


@router.get("", response_model=ApiResponse[List[MealResponse]])
async def list_meals(
    month: Optional[MonthKey] = Query(None),
    member_id: Optional[str] = Query(None),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Meal rows, newest first, optionally for one month and/or member."""
    member_oid = None
    if member_id:
        member_oid = to_object_id(member_id)
        if member_oid is None:
            raise ValidationError("Invalid member ID")

    meals = await MealRepository(db).list_rows(month, member_id=member_oid)
    names = await UserRepository(db).get_names(m.member_id for m in meals)
    return ApiResponse(data=[MealResponse.from_row(m, names) for m in meals])


@router.post("", response_model=ApiResponse[MealBatchResult], status_code=status.HTTP_201_CREATED)
async def save_meals(
    batch: MealBatch,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Set a day's meal counts; a count of zero removes that member's entry."""
    result = await apply_meal_batch(MealRepository(db), current_user, batch)
    return ApiResponse(data=result)


@router.put("", response_model=ApiResponse[MealResponse])
async def update_meal(
    meal_in: MealUpdate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    meal = await LedgerService(MealRepository(db), current_user).update(meal_in)
    names = await UserRepository(db).get_names([meal.member_id])
    return ApiResponse(data=MealResponse.from_row(meal, names))


@router.delete("", response_model=ApiResponse[None])
async def delete_meal(
    id: str = Query(...),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    await LedgerService(MealRepository(db), current_user).delete(id)
    return ApiResponse(data=None)
