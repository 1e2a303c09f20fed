from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List

from app.crud.base import CRUDBase
from app.core.constants import StorageTypeEnum
from app.models.file import File


class CRUDFile(CRUDBase[File, dict, dict]):

    def get_by_owner(self, db: Session, admin_id: int) -> List[File]:
        return db.query(File).filter(File.admin_id == admin_id).order_by(File.created_at.desc(), File.id.desc()).all()

    def search_by_name(self, db: Session, *, name: str, storage_type: StorageTypeEnum, admin_id: int) -> List[File]:
        return (
            db.query(File)
            .filter(
                File.admin_id == admin_id,
                File.storage_type == storage_type,
                func.lower(File.name).contains(name.lower(), autoescape=True),
            )
            .order_by(File.created_at.desc(), File.id.desc())
            .all()
        )


file = CRUDFile(File)
