from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime
from app.core.constants import CourseLevelEnum, CourseStatusEnum, CatalogVisibilityEnum
from app.schemas.category import Category
from app.schemas.file import File
from app.schemas.response import PaginatedResponse

class CourseBase(BaseModel):
    title: str = Field(..., max_length=255)
    description: Optional[str] = None
    difficulty: CourseLevelEnum = Field(default=CourseLevelEnum.BEGINNER)
    status: CourseStatusEnum = Field(default=CourseStatusEnum.ACTIVE)

    @field_validator("title")
    def title_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        return v

class CourseCreate(CourseBase):
    category_ids: List[int] = Field(default_factory=list)

class CourseUpdate(CourseCreate):
    """Full replacement of the mutable fields and of the category set."""

class Course(CourseBase):
    id: int
    admin_id: int
    thumbnail: Optional[File] = None
    categories: List[Category] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class CatalogFilters(BaseModel):
    title: Optional[str] = None
    category_ids: Optional[List[int]] = None
    difficulty: Optional[CourseLevelEnum] = None
    subscribed_only: bool = False

class CatalogScope(BaseModel):
    """Who is asking for the catalog; ``user_id`` is None only for public reads."""
    visibility: CatalogVisibilityEnum
    user_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)

CoursePage = PaginatedResponse[Course]
