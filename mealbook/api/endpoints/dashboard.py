from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from mealbook.core.auth import get_current_user
from mealbook.db.mongo import get_db
from mealbook.models.user import Member, UserInDB
from mealbook.repositories.user_repo import UserRepository
from mealbook.schemas.dashboard import DashboardData, MemberProfileData
from mealbook.schemas.envelope import ApiResponse
from mealbook.services.dashboard_service import DashboardService
from mealbook.utils.months import MonthKey

router = APIRouter()


@router.get("/dashboard", response_model=ApiResponse[DashboardData])
async def get_dashboard(
    month: Optional[MonthKey] = Query(None),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Household totals, meal rate and per-member bills for a month."""
    service = DashboardService(db)
    month = await service.resolve_month(month)
    return ApiResponse(data=await service.summarize_month(month))


@router.get("/user/{member_id}", response_model=ApiResponse[MemberProfileData])
async def get_member_profile(
    member_id: str,
    month: MonthKey = Query(...),
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """One member's summary and history for a month."""
    return ApiResponse(data=await DashboardService(db).summarize_member(member_id, month))


@router.get("/members", response_model=ApiResponse[List[Member]])
async def list_members(
    current_user: UserInDB = Depends(get_current_user),
    db = Depends(get_db)
):
    """Active household members."""
    users = await UserRepository(db).list_active_members()
    return ApiResponse(data=[
        Member(
            id=str(u.id),
            name=u.name,
            phone_number=u.phone_number,
            role=u.role,
            created_at=u.created_at
        )
        for u in users
    ])
