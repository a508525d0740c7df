from typing import List, Literal

from pydantic import BaseModel, Field

from mealbook.models.user import TrimmedStr, UserInDB, UserRole


class LoginRequest(BaseModel):
    """Schema for user login"""
    action: Literal["login"]
    phone_number: TrimmedStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """Schema for user signup"""
    action: Literal["signup"]
    phone_number: TrimmedStr
    password: str = Field(..., min_length=1)
    name: TrimmedStr = Field(..., max_length=60)


class LogoutRequest(BaseModel):
    action: Literal["logout"]


class AuthUser(BaseModel):
    """The authenticated actor as returned to clients."""
    id: str
    phone_number: str
    name: str
    role: UserRole
    assigned_months: List[str] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: UserInDB) -> "AuthUser":
        return cls(
            id=str(user.id),
            phone_number=user.phone_number,
            name=user.name,
            role=user.role,
            assigned_months=user.assigned_months
        )


class AuthSession(BaseModel):
    """Schema for authentication token response"""
    access_token: str
    token_type: str = "bearer"
    user: AuthUser


class PasswordChange(BaseModel):
    """Schema for changing password"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UserPermissions(BaseModel):
    can_view_all: bool = False
    can_manage_members: bool = False
    can_manage_data: bool = False
    can_manage_current_month: bool = False
    can_manage_assigned_month: bool = False
    assigned_months: List[str] = Field(default_factory=list)


class AuthMe(BaseModel):
    user: AuthUser
    permissions: UserPermissions
    month: str


class UserCheck(BaseModel):
    has_users: bool
