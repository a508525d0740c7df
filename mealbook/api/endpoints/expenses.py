from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from mealbook.core.auth import get_current_user
from mealbook.db.mongo import get_db
from mealbook.models.ledger import ExpenseCreate, ExpenseInDB, ExpenseUpdate
from mealbook.models.user import UserInDB
from mealbook.repositories.expense_repo import ExpenseRepository
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.envelope import ApiResponse
from mealbook.schemas.ledger import ExpenseResponse
from mealbook.services.ledger_service import LedgerService
from mealbook.utils.months import MonthKey

router = APIRouter()


async def _present(db, expenses: List[ExpenseInDB]) -> List[ExpenseResponse]:
    referenced = set()
    for e in expenses:
        referenced.add(e.paid_by)
        referenced.update(e.split_among)
    names = await UserRepository(db).get_names(referenced)
    return [ExpenseResponse.from_row(e, names) for e in expenses]


@router.get("", response_model=ApiResponse[List[ExpenseResponse]])
async def list_expenses(
    month: Optional[MonthKey] = Query(None),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    expenses = await ExpenseRepository(db).list_rows(month)
    return ApiResponse(data=await _present(db, expenses))


@router.post("", response_model=ApiResponse[ExpenseResponse], status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_in: ExpenseCreate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Record a shared expense split evenly among ``split_among``."""
    expense = await LedgerService(ExpenseRepository(db), current_user).create(expense_in)
    return ApiResponse(data=(await _present(db, [expense]))[0])


@router.put("", response_model=ApiResponse[ExpenseResponse])
async def update_expense(
    expense_in: ExpenseUpdate,
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    expense = await LedgerService(ExpenseRepository(db), current_user).update(expense_in)
    return ApiResponse(data=(await _present(db, [expense]))[0])


@router.delete("", response_model=ApiResponse[None])
async def delete_expense(
    id: str = Query(...),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    await LedgerService(ExpenseRepository(db), current_user).delete(id)
    return ApiResponse(data=None)
