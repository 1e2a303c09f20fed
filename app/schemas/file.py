from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from app.core.constants import StorageTypeEnum

class File(BaseModel):
    id: int
    name: str
    key: str
    url: str
    mime_type: str
    size: int
    storage_type: StorageTypeEnum
    admin_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class FileUpload(BaseModel):
    """Raw upload handed from the boundary to the file lifecycle."""
    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)
