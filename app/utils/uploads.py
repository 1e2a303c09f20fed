from typing import Optional
from fastapi import HTTPException, UploadFile, status

from app.core.config import settings
from app.schemas.file import FileUpload
from app.utils.logger import setup_logger

logger = setup_logger("uploads", "uploads.log")

async def read_image_upload(file: Optional[UploadFile]) -> Optional[FileUpload]:
    """Read an optional multipart image into memory, rejecting non-images and oversized content."""
    if file is None or not file.filename:
        return None

    if not file.content_type or not file.content_type.startswith("image/"):
        logger.warning(f"Rejected upload {file.filename} with content type {file.content_type}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid file type. Please upload an image.")

    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty.")
    if len(content) > settings.MAX_IMAGE_SIZE:
        logger.warning(f"Rejected upload {file.filename} of {len(content)} bytes")
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image exceeds the maximum allowed size of {settings.MAX_IMAGE_SIZE} bytes."
        )

    return FileUpload(content=content, filename=file.filename, content_type=file.content_type)
