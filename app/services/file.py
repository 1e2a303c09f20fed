from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from app.core.constants import StorageTypeEnum
from app.core.exceptions import NotFoundError, ForbiddenError
from app.crud.file import file as crud_file
from app.models.course import Course
from app.models.file import File as FileModel
from app.schemas.file import File as FileSchema, FileUpload
from app.services.storage import BlobStorage, get_blob_storage
from app.utils.cache_invalidation import cache_invalidator
from app.utils.logger import setup_logger

logger = setup_logger("file_service", "file_service.log")


class FileService:
    """Keeps every file record paired with exactly one live blob.

    Blobs are written before the record that points at them and removed only
    after the record stops pointing at them, so a failure at any step can leave
    at most an orphan blob (cleaned up here, best effort) and never a record
    without its blob.
    """

    def __init__(self, storage: Optional[BlobStorage] = None):
        self._storage = storage

    @property
    def storage(self) -> BlobStorage:
        if self._storage is None:
            self._storage = get_blob_storage()
        return self._storage

    def _get_owned_file(self, db: Session, file_id: int, owner_id: int, kind: Optional[StorageTypeEnum] = None) -> FileModel:
        file = crud_file.get(db, id=file_id)
        if not file or (kind is not None and file.storage_type != kind):
            raise NotFoundError("File not found.")
        if file.admin_id != owner_id:
            raise ForbiddenError("You do not own this file.")
        return file

    def _store_blob(self, kind: StorageTypeEnum, upload: FileUpload) -> str:
        return self.storage.put(
            upload.content,
            prefix=f"{kind.value}s",
            filename=upload.filename,
            content_type=upload.content_type,
        )

    def discard_blob(self, key: str) -> None:
        """Compensating delete; failures are logged so they never mask the outcome being reported."""
        try:
            self.storage.delete(key)
            logger.info(f"Deleted blob {key}")
        except Exception as e:
            logger.error(f"Failed to delete blob {key}, it is now orphaned: {e}")

    def create(self, db: Session, *, owner_id: int, kind: StorageTypeEnum, upload: FileUpload, commit: bool = True) -> FileModel:
        key = self._store_blob(kind, upload)
        try:
            new_file = crud_file.create(db, obj_in={
                "name": upload.filename or key.rsplit("/", 1)[-1],
                "key": key,
                "url": self.storage.url_for(key),
                "mime_type": upload.content_type or "application/octet-stream",
                "size": upload.size,
                "storage_type": kind,
                "admin_id": owner_id,
            }, commit=commit)
        except Exception:
            db.rollback()
            self.discard_blob(key)
            raise

        logger.info(f"Admin {owner_id} stored file {new_file.id} under {key}")
        return new_file

    def stage_replacement(self, db: Session, file: FileModel, *, owner_id: int, kind: StorageTypeEnum, upload: FileUpload) -> str:
        """Store the new blob and point ``file`` at it without committing.

        Returns the previous key; the caller discards it once the transaction
        has committed, or discards ``file.key`` if the commit fails.
        """
        if file.admin_id != owner_id:
            raise ForbiddenError("You do not own this file.")

        new_key = self._store_blob(kind, upload)
        old_key = file.key
        try:
            file.key = new_key
            file.url = self.storage.url_for(new_key)
            file.name = upload.filename or file.name
            file.mime_type = upload.content_type or file.mime_type
            file.size = upload.size
            file.storage_type = kind
            db.add(file)
            db.flush()
        except Exception:
            db.rollback()
            self.discard_blob(new_key)
            raise
        return old_key

    def replace(self, db: Session, *, file_id: int, owner_id: int, kind: StorageTypeEnum, upload: FileUpload) -> FileModel:
        file = self._get_owned_file(db, file_id, owner_id, kind)
        old_key = self.stage_replacement(db, file, owner_id=owner_id, kind=kind, upload=upload)
        new_key = file.key
        try:
            db.commit()
        except Exception:
            db.rollback()
            self.discard_blob(new_key)
            raise

        self.discard_blob(old_key)
        db.refresh(file)
        cache_invalidator.invalidate_catalog()
        logger.info(f"Admin {owner_id} replaced file {file.id}: {old_key} -> {new_key}")
        return file

    def delete(self, db: Session, *, file_id: int, owner_id: int, kind: StorageTypeEnum, commit: bool = True) -> FileSchema:
        """Remove the record, then its blob; returns the record as it was before deletion.

        With ``commit=False`` the caller owns the transaction and must call
        ``discard_blob`` with the returned key after committing.
        """
        file = self._get_owned_file(db, file_id, owner_id, kind)
        removed = FileSchema.model_validate(file)

        try:
            db.query(Course).filter(Course.thumbnail_id == file.id).update(
                {Course.thumbnail_id: None}, synchronize_session=False
            )
            db.delete(file)
            db.flush()
            if commit:
                db.commit()
        except Exception:
            db.rollback()
            raise

        if commit:
            self.discard_blob(removed.key)
            cache_invalidator.invalidate_catalog()
            logger.info(f"Admin {owner_id} deleted file {removed.id}")
        return removed

    def render(self, db: Session, file_id: int) -> Tuple[bytes, str]:
        """Public read; no ownership check."""
        file = crud_file.get(db, id=file_id)
        if not file:
            raise NotFoundError("File not found.")
        return self.storage.get(file.key), file.mime_type

    def list_files(self, db: Session, owner_id: int) -> List[FileModel]:
        return crud_file.get_by_owner(db, admin_id=owner_id)

    def search_files(self, db: Session, *, name: str, kind: StorageTypeEnum, owner_id: int) -> List[FileModel]:
        return crud_file.search_by_name(db, name=name, storage_type=kind, admin_id=owner_id)

file_service = FileService()
