from sqlalchemy import Boolean, Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import RoleEnum
from app.models.course import course_subscribers_association

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(Enum(RoleEnum), nullable=False, default=RoleEnum.STUDENT)
    is_active = Column(Boolean(), default=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Administrator side
    courses = relationship("Course", back_populates="admin", foreign_keys="Course.admin_id")
    categories = relationship("Category", back_populates="admin")
    files = relationship("File", back_populates="admin")

    # Student side
    subscriptions = relationship("Course", secondary=course_subscribers_association, back_populates="subscribers")
