from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field, StringConstraints

from mealbook.models.base import TimestampedModel
from mealbook.utils.months import MonthKey

TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class UserRole(str, Enum):
    GENERAL = "general"
    MANAGER = "manager"
    SUPER = "super"


class GeneralAccess(BaseModel):
    role: Literal["general"] = "general"


class ManagerAccess(BaseModel):
    """Managers may write ledger data only for the months they are assigned."""
    role: Literal["manager"] = "manager"
    assigned_months: List[MonthKey] = Field(..., min_length=1)


class SuperAccess(BaseModel):
    role: Literal["super"] = "super"


Access = Annotated[
    Union[GeneralAccess, ManagerAccess, SuperAccess],
    Field(discriminator="role")
]


def build_access(role: UserRole | str, assigned_months: Optional[List[str]] = None):
    """Build the access variant for a role; raises pydantic.ValidationError for a manager without months."""
    role = UserRole(role)
    if role == UserRole.MANAGER:
        return ManagerAccess(assigned_months=assigned_months or [])
    if role == UserRole.SUPER:
        return SuperAccess()
    return GeneralAccess()


class UserInDB(TimestampedModel):
    """User database schema."""
    phone_number: str
    name: str
    email: Optional[str] = None
    password_hash: str
    access: Access = Field(default_factory=GeneralAccess)
    is_active: bool = True

    @property
    def role(self) -> UserRole:
        return UserRole(self.access.role)

    @property
    def assigned_months(self) -> List[str]:
        return list(getattr(self.access, "assigned_months", []))

    @property
    def is_super(self) -> bool:
        return self.role == UserRole.SUPER


class UserCreate(BaseModel):
    """Account creation by a super user."""
    name: TrimmedStr = Field(..., max_length=60)
    phone_number: TrimmedStr
    password: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: UserRole = UserRole.GENERAL
    assigned_months: Optional[List[MonthKey]] = None


class UserAccessUpdate(BaseModel):
    """Role / activation change by a super user."""
    user_id: str
    role: UserRole
    assigned_months: Optional[List[MonthKey]] = None
    is_active: Optional[bool] = None


class Member(BaseModel):
    """Read-only view of an active household member."""
    id: str
    name: str
    phone_number: str
    role: UserRole
    created_at: Optional[datetime] = None
