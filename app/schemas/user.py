from pydantic import BaseModel, ConfigDict
from typing import Optional

from app.core.constants import RoleEnum

class UserBase(BaseModel):
    """Base user schema with common fields."""
    full_name: Optional[str] = None
    email: str

class UserCreate(UserBase):
    role: RoleEnum = RoleEnum.STUDENT
    is_active: bool = True

class User(UserBase):
    """Main user schema for reading user data."""
    id: int
    role: RoleEnum
    is_active: bool
    model_config = ConfigDict(from_attributes=True)

class UserContext(BaseModel):
    """Identity of the caller: the shared user core plus the role that selects its capabilities."""
    user: User
    role: RoleEnum
    model_config = ConfigDict(from_attributes=True)

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def is_admin(self) -> bool:
        return self.role == RoleEnum.ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == RoleEnum.STUDENT
