from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Table, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import CourseLevelEnum, CourseStatusEnum

course_categories_association = Table(
    "course_categories_association",
    Base.metadata,
    Column("course_id", Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)

course_subscribers_association = Table(
    "course_subscribers_association",
    Base.metadata,
    Column("course_id", Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), index=True, nullable=False, default="No Title")
    description = Column(Text, nullable=True)
    difficulty = Column(Enum(CourseLevelEnum), nullable=False, default=CourseLevelEnum.BEGINNER)
    status = Column(Enum(CourseStatusEnum), nullable=False, default=CourseStatusEnum.ACTIVE)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    thumbnail_id = Column(Integer, ForeignKey("files.id", ondelete="SET NULL"), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    admin = relationship("User", back_populates="courses", foreign_keys=[admin_id])
    thumbnail = relationship("File", foreign_keys=[thumbnail_id])
    categories = relationship("Category", secondary=course_categories_association, back_populates="courses")
    subscribers = relationship("User", secondary=course_subscribers_association, back_populates="subscriptions")
    sections = relationship("Section", back_populates="course")
