from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional

from app.crud.base import CRUDBase
from app.models.category import Category
from app.schemas.category import CategoryCreate, CategoryUpdate


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryUpdate]):

    def get_by_ids(self, db: Session, ids: List[int]) -> List[Category]:
        if not ids:
            return []
        return db.query(Category).filter(Category.id.in_(list(set(ids)))).order_by(Category.id).all()

    def get_by_normalized_title(self, db: Session, title: str, exclude_id: Optional[int] = None) -> Optional[Category]:
        query = db.query(Category).filter(func.lower(func.trim(Category.title)) == title.strip().lower())
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        return query.first()

    def search_by_title(self, db: Session, title: str) -> List[Category]:
        return (
            db.query(Category)
            .filter(func.lower(Category.title).contains(title.lower(), autoescape=True))
            .order_by(Category.title)
            .all()
        )


category = CRUDCategory(Category)
