"""Who may write what.

Reads are never gated here; every ledger mutation is checked against the
month it touches before anything is written.
"""
import logging
from typing import Optional

from mealbook.core.errors import ForbiddenError
from mealbook.models.user import ManagerAccess, SuperAccess, UserInDB
from mealbook.schemas.auth import UserPermissions

logger = logging.getLogger(__name__)

MONTH_FORBIDDEN = "You do not have permission to manage data for this month"


def can_manage_month(actor: Optional[UserInDB], month: str) -> bool:
    if actor is None:
        return False
    access = actor.access
    if isinstance(access, SuperAccess):
        return True
    if isinstance(access, ManagerAccess):
        return month in access.assigned_months
    return False


def can_manage_members(actor: Optional[UserInDB]) -> bool:
    return actor is not None and isinstance(actor.access, SuperAccess)


def ensure_can_manage_month(actor: Optional[UserInDB], month: str) -> None:
    if not can_manage_month(actor, month):
        logger.info(
            "Denied write for month %s to user %s",
            month, actor.id if actor else None
        )
        raise ForbiddenError(MONTH_FORBIDDEN)


def ensure_can_manage_members(actor: Optional[UserInDB]) -> None:
    if not can_manage_members(actor):
        raise ForbiddenError()


def get_user_permissions(actor: Optional[UserInDB], month: str) -> UserPermissions:
    """Flags the client uses to decide which controls to show for ``month``."""
    if actor is None:
        return UserPermissions()

    is_super = isinstance(actor.access, SuperAccess)
    is_manager = isinstance(actor.access, ManagerAccess)
    return UserPermissions(
        can_view_all=True,
        can_manage_members=is_super,
        can_manage_data=is_super or is_manager,
        can_manage_current_month=can_manage_month(actor, month),
        can_manage_assigned_month=is_super or is_manager,
        assigned_months=actor.assigned_months
    )
