from fastapi import APIRouter
from mealbook.api.endpoints import auth, users, meals, groceries, expenses, deposits, settings, dashboard

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(meals.router, prefix="/meals", tags=["meals"])
api_router.include_router(groceries.router, prefix="/groceries", tags=["groceries"])
api_router.include_router(expenses.router, prefix="/expenses", tags=["expenses"])
api_router.include_router(deposits.router, prefix="/deposits", tags=["deposits"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
api_router.include_router(dashboard.router, tags=["dashboard"])
