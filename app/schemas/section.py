from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Any
from datetime import datetime
from app.core.constants import SectionTypeEnum

class SectionBase(BaseModel):
    title: str = Field(default="No Title", min_length=1, max_length=255)
    objective: Optional[str] = None
    duration: int = Field(default=0, ge=0, description="Duration in minutes")
    section_type: SectionTypeEnum = SectionTypeEnum.MATERIAL

class SectionCreate(SectionBase):
    course_id: int
    parent_id: Optional[int] = None

class SectionUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    objective: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    section_type: Optional[SectionTypeEnum] = None

    @model_validator(mode='before')
    @classmethod
    def at_least_one_value(cls, data: Any):
        if isinstance(data, dict) and not any(v is not None for v in data.values()):
            raise ValueError("At least one field must be provided for update")
        return data

class SectionMove(BaseModel):
    parent_id: Optional[int] = None

class Section(SectionBase):
    id: int
    course_id: int
    parent_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class SectionTree(Section):
    children: List[SectionTree] = Field(default_factory=list)

SectionTree.model_rebuild()
