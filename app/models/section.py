from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import SectionTypeEnum

class Section(Base):
    __tablename__ = "sections"
    __table_args__ = (
        CheckConstraint("duration >= 0", name="ck_sections_duration_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, default="No Title")
    objective = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False, default=0) # Duration in minutes
    section_type = Column(Enum(SectionTypeEnum), nullable=False, default=SectionTypeEnum.MATERIAL)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("sections.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course", back_populates="sections")
    parent = relationship("Section", remote_side=[id], back_populates="children")
    children = relationship("Section", back_populates="parent", order_by="Section.id")


class SectionClosure(Base):
    """One row per (ancestor, descendant) pair of a course's section forest, self pairs included."""
    __tablename__ = "section_closure"
    __table_args__ = (
        Index("ix_section_closure_descendant_depth", "descendant_id", "depth"),
    )

    ancestor_id = Column(Integer, ForeignKey("sections.id", ondelete="CASCADE"), primary_key=True)
    descendant_id = Column(Integer, ForeignKey("sections.id", ondelete="CASCADE"), primary_key=True)
    depth = Column(Integer, nullable=False, default=0)
