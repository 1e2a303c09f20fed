from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func
from typing import List, Optional, Tuple

from app.crud.base import CRUDBase
from app.core.constants import CatalogVisibilityEnum, CourseStatusEnum
from app.models.course import Course
from app.models.category import Category
from app.models.user import User
from app.schemas.course import CourseCreate, CourseUpdate, CatalogFilters, CatalogScope


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Course).options(
            selectinload(Course.categories),
            selectinload(Course.thumbnail),
        )

    def _query_active(self, db: Session):
        return self._query_with_relationships(db).filter(Course.deleted_at.is_(None))

    def get(self, db: Session, id: int) -> Optional[Course]:
        return self._query_active(db).filter(Course.id == id).first()

    def get_for_owner(self, db: Session, *, id: int, admin_id: Optional[int]) -> Optional[Course]:
        query = self._query_active(db).filter(Course.id == id)
        if admin_id is not None:
            query = query.filter(Course.admin_id == admin_id)
        return query.first()

    def build_catalog_conditions(self, filters: CatalogFilters, scope: CatalogScope) -> List:
        conditions = [Course.deleted_at.is_(None)]

        if filters.title:
            conditions.append(func.lower(Course.title).contains(filters.title.lower(), autoescape=True))
        if filters.category_ids:
            conditions.append(Course.categories.any(Category.id.in_(filters.category_ids)))
        if filters.difficulty is not None:
            conditions.append(Course.difficulty == filters.difficulty)

        if scope.visibility == CatalogVisibilityEnum.UNSCOPED:
            conditions.append(Course.admin_id == scope.user_id)
        elif scope.visibility == CatalogVisibilityEnum.SCOPED_BY_SUBSCRIPTION and filters.subscribed_only:
            conditions.append(Course.subscribers.any(User.id == scope.user_id))
        else:
            conditions.append(Course.status == CourseStatusEnum.ACTIVE)

        return conditions

    def get_catalog_page(self, db: Session, *, conditions: List, skip: int, limit: int) -> Tuple[List[Course], int]:
        total = db.query(func.count(Course.id)).filter(*conditions).scalar() or 0
        items = (
            self._query_with_relationships(db)
            .filter(*conditions)
            .order_by(Course.created_at.desc(), Course.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return items, total

    def set_categories(self, db: Session, *, course: Course, categories: List[Category]) -> Course:
        course.categories = list(categories)
        db.add(course)
        return course

    def add_subscriber(self, db: Session, *, course: Course, user: User) -> Course:
        if user not in course.subscribers:
            course.subscribers.append(user)
            db.add(course)
        return course

    def remove_subscriber(self, db: Session, *, course: Course, user: User) -> Course:
        if user in course.subscribers:
            course.subscribers.remove(user)
            db.add(course)
        return course

    def is_subscribed(self, db: Session, *, course_id: int, user_id: int) -> bool:
        return db.query(Course.id).filter(
            Course.id == course_id,
            Course.subscribers.any(User.id == user_id),
        ).first() is not None


course = CRUDCourse(Course)
