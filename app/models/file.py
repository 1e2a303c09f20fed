from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import StorageTypeEnum

class File(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    key = Column(String(512), unique=True, nullable=False)
    url = Column(String(1024), nullable=False)
    mime_type = Column(String(127), nullable=False, default="application/octet-stream")
    size = Column(Integer, nullable=False, default=0)
    storage_type = Column(Enum(StorageTypeEnum), nullable=False, default=StorageTypeEnum.IMAGE)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    admin = relationship("User", back_populates="files")
