from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from mealbook.core.auth import get_current_user
from mealbook.db.mongo import get_db
from mealbook.models.ledger import DepositCreate, DepositUpdate
from mealbook.models.user import UserInDB
from mealbook.repositories.deposit_repo import DepositRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.envelope import ApiResponse
from mealbook.schemas.ledger import DepositResponse
from mealbook.services.ledger_service import LedgerService
from mealbook.utils.months import MonthKey

router = APIRouter()


@router.get("", response_model=ApiResponse[List[DepositResponse]])
async def list_deposits(
    month: Optional[MonthKey] = Query(None),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    deposits = await DepositRepository(db).list_rows(month)
    names = await UserRepository(db).get_names(d.member_id for d in deposits)
    return ApiResponse(data=[DepositResponse.from_row(d, names) for d in deposits])


@router.post("", response_model=ApiResponse[DepositResponse], status_code=status.HTTP_201_CREATED)
async def create_deposit(
    deposit_in: DepositCreate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    deposit = await LedgerService(DepositRepository(db), current_user).create(deposit_in)
    names = await UserRepository(db).get_names([deposit.member_id])
    return ApiResponse(data=DepositResponse.from_row(deposit, names))


@router.put("", response_model=ApiResponse[DepositResponse])
async def update_deposit(
    deposit_in: DepositUpdate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    deposit = await LedgerService(DepositRepository(db), current_user).update(deposit_in)
    names = await UserRepository(db).get_names([deposit.member_id])
    return ApiResponse(data=DepositResponse.from_row(deposit, names))


@router.delete("", response_model=ApiResponse[None])
async def delete_deposit(
    id: str = Query(...),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    await LedgerService(DepositRepository(db), current_user).delete(id)
    return ApiResponse(data=None)
