from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from mealbook.core.auth import get_current_user
from mealbook.db.mongo import get_db
from mealbook.models.ledger import GroceryCreate, GroceryInDB, GroceryUpdate
from mealbook.models.user import UserInDB
from mealbook.repositories.grocery_repo import GroceryRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.envelope import ApiResponse
from mealbook.schemas.ledger import GroceryResponse
from mealbook.services.ledger_service import LedgerService
from mealbook.utils.months import MonthKey

router = APIRouter()


async def _present(db, groceries: List[GroceryInDB]) -> List[GroceryResponse]:
    referenced = set()
    for g in groceries:
        referenced.add(g.done_by)
        if g.added_by:
            referenced.add(g.added_by)
    names = await UserRepository(db).get_names(referenced)
    return [GroceryResponse.from_row(g, names) for g in groceries]


@router.get("", response_model=ApiResponse[List[GroceryResponse]])
async def list_groceries(
    month: Optional[MonthKey] = Query(None),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    groceries = await GroceryRepository(db).list_rows(month)
    return ApiResponse(data=await _present(db, groceries))


@router.post("", response_model=ApiResponse[GroceryResponse], status_code=status.HTTP_201_CREATED)
async def create_grocery(
    grocery_in: GroceryCreate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Record a grocery purchase; the actor is stored as ``added_by``."""
    grocery = await LedgerService(GroceryRepository(db), current_user).create(
        grocery_in, added_by=current_user.id
    )
    return ApiResponse(data=(await _present(db, [grocery]))[0])


@router.put("", response_model=ApiResponse[GroceryResponse])
async def update_grocery(
    grocery_in: GroceryUpdate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    grocery = await LedgerService(GroceryRepository(db), current_user).update(grocery_in)
    return ApiResponse(data=(await _present(db, [grocery]))[0])


@router.delete("", response_model=ApiResponse[None])
async def delete_grocery(
    id: str = Query(...),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    await LedgerService(GroceryRepository(db), current_user).delete(id)
    return ApiResponse(data=None)
