import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ConflictError
from app.crud.category import category as crud_category
from app.schemas.category import CategoryCreate, CategoryUpdate, Category as CategorySchema
from app.utils.cache_invalidation import cache_invalidator

logger = logging.getLogger(__name__)


class CategoryService:

    def get_categories(self, db: Session, title: Optional[str] = None) -> List[CategorySchema]:
        if title:
            categories = crud_category.search_by_title(db, title)
        else:
            categories = crud_category.get_multi(db, limit=1000)
        return [CategorySchema.model_validate(c) for c in categories]

    def create_category(self, db: Session, category_in: CategoryCreate, admin_id: int) -> CategorySchema:
        if crud_category.get_by_normalized_title(db, category_in.title):
            raise ConflictError("Category already exists.")

        new_category = crud_category.create(db, obj_in={"title": category_in.title, "admin_id": admin_id})
        cache_invalidator.invalidate_catalog()
        return CategorySchema.model_validate(new_category)

    def update_category(self, db: Session, category_id: int, category_in: CategoryUpdate) -> CategorySchema:
        category = crud_category.get(db, id=category_id)
        if not category:
            raise NotFoundError("Category not found.")

        if crud_category.get_by_normalized_title(db, category_in.title, exclude_id=category_id):
            raise ConflictError("Category already exists.")

        updated_category = crud_category.update(db, db_obj=category, obj_in={"title": category_in.title})
        cache_invalidator.invalidate_catalog()
        return CategorySchema.model_validate(updated_category)

    def delete_category(self, db: Session, category_id: int) -> CategorySchema:
        category = crud_category.get(db, id=category_id)
        if not category:
            raise NotFoundError("Category not found.")

        deleted_category = CategorySchema.model_validate(category)
        category.courses = []
        crud_category.delete(db, id=category_id)

        cache_invalidator.invalidate_catalog()
        logger.info(f"Deleted category {category_id}")
        return deleted_category

category_service = CategoryService()
