from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

class CategoryBase(BaseModel):
    title: str

    @field_validator("title")
    def not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        if len(v.strip()) > 255:
            raise ValueError("Title must be at most 255 characters long.")
        return v.strip()

class CategoryCreate(CategoryBase):
    pass

class CategoryUpdate(CategoryBase):
    pass

class Category(BaseModel):
    id: int
    title: str
    admin_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
