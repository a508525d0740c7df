from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mealbook.core.config import settings
from mealbook.core.errors import UnauthorizedError
from mealbook.core.permissions import ensure_can_manage_members
from mealbook.core.security import decode_access_token
from mealbook.db.mongo import get_db
from mealbook.models.user import UserInDB
from mealbook.repositories.user_repo import UserRepository

security = HTTPBearer(auto_error=False)


def _read_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db = Depends(get_db)
) -> Optional[UserInDB]:
    """Current user from the session cookie or bearer token, if any."""
    token = _read_token(request, credentials)
    if not token:
        return None

    user_id = decode_access_token(token)
    if user_id is None:
        return None

    user = await UserRepository(db).get_user_by_id(user_id)
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(user: Optional[UserInDB] = Depends(get_optional_user)) -> UserInDB:
    """Get current user; 401 when the session is missing, invalid, or deactivated."""
    if user is None:
        raise UnauthorizedError()
    return user


async def get_super_user(user: UserInDB = Depends(get_current_user)) -> UserInDB:
    ensure_can_manage_members(user)
    return user
