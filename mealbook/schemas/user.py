from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from mealbook.models.user import UserInDB, UserRole


class UserResponse(BaseModel):
    """User response schema."""
    id: str
    phone_number: str
    name: str
    email: Optional[str] = None
    role: UserRole
    assigned_months: List[str] = Field(default_factory=list)
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: UserInDB) -> "UserResponse":
        return cls(
            id=str(user.id),
            phone_number=user.phone_number,
            name=user.name,
            email=user.email,
            role=user.role,
            assigned_months=user.assigned_months,
            is_active=user.is_active,
            created_at=user.created_at,
            updated_at=user.updated_at
        )
