import logging
import math
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.constants import CatalogVisibilityEnum, CourseStatusEnum, RoleEnum, StorageTypeEnum
from app.core.exceptions import NotFoundError, InvalidOperationError, ConflictError
from app.crud.category import category as crud_category
from app.crud.course import course as crud_course
from app.crud.user import user as crud_user
from app.models.category import Category
from app.models.course import Course as CourseModel
from app.schemas.course import CourseCreate, CourseUpdate, Course as CourseSchema, CatalogFilters, CatalogScope, CoursePage
from app.schemas.file import FileUpload
from app.services.file import file_service
from app.utils import cache
from app.utils.cache_invalidation import cache_invalidator, catalog_cache_key

logger = logging.getLogger(__name__)


class CourseService:

    def _resolve_categories(self, db: Session, category_ids: Optional[List[int]]) -> List[Category]:
        """Unknown ids are dropped rather than rejected."""
        categories = crud_category.get_by_ids(db, category_ids or [])
        if category_ids and len(categories) != len(set(category_ids)):
            found = {c.id for c in categories}
            logger.info(f"Ignoring unknown category ids: {sorted(set(category_ids) - found)}")
        return categories

    def fetch_catalog(self, db: Session, filters: CatalogFilters, scope: CatalogScope, page: int, page_size: int) -> CoursePage:
        if page < 1 or page_size < 1:
            raise InvalidOperationError("page and page_size must be positive integers.")
        if scope.visibility != CatalogVisibilityEnum.PUBLIC and scope.user_id is None:
            raise InvalidOperationError("A scoped catalog read needs a user.")

        cache_key = catalog_cache_key(filters, scope, page, page_size)
        cached = cache.get(cache_key)
        if cached is not None:
            return cached

        conditions = crud_course.build_catalog_conditions(filters, scope)
        courses, total = crud_course.get_catalog_page(
            db, conditions=conditions, skip=(page - 1) * page_size, limit=page_size
        )
        pages = math.ceil(total / page_size)

        result = CoursePage(
            items=[CourseSchema.model_validate(c) for c in courses],
            total=total,
            page=page,
            size=page_size,
            pages=pages,
            has_next=page < pages,
            has_previous=page > 1,
        )
        cache.set(cache_key, result)
        return result

    def get_course(self, db: Session, course_id: int, admin_id: Optional[int] = None) -> CourseSchema:
        # Another administrator's course is reported exactly like a missing one.
        course = crud_course.get_for_owner(db, id=course_id, admin_id=admin_id)
        if not course:
            raise NotFoundError("Course not found.")
        return CourseSchema.model_validate(course)

    def create_course(self, db: Session, course_in: CourseCreate, owner_id: int, image: Optional[FileUpload] = None) -> CourseSchema:
        owner = crud_user.get(db, id=owner_id)
        if not owner or owner.role != RoleEnum.ADMIN:
            raise NotFoundError("Administrator not found.")

        categories = self._resolve_categories(db, course_in.category_ids)

        thumbnail_key = None
        try:
            thumbnail = None
            if image is not None:
                thumbnail = file_service.create(db, owner_id=owner_id, kind=StorageTypeEnum.IMAGE, upload=image, commit=False)
                thumbnail_key = thumbnail.key

            new_course = CourseModel(
                title=course_in.title,
                description=course_in.description,
                difficulty=course_in.difficulty,
                status=course_in.status,
                admin_id=owner_id,
                thumbnail=thumbnail,
                categories=categories,
            )
            db.add(new_course)
            db.commit()
        except Exception:
            db.rollback()
            if thumbnail_key:
                file_service.discard_blob(thumbnail_key)
            raise

        db.refresh(new_course)
        cache_invalidator.invalidate_catalog()
        logger.info(f"Admin {owner_id} created course {new_course.id}")
        return CourseSchema.model_validate(new_course)

    def update_course(self, db: Session, course_id: int, course_in: CourseUpdate, owner_id: int, image: Optional[FileUpload] = None) -> CourseSchema:
        course = crud_course.get_for_owner(db, id=course_id, admin_id=owner_id)
        if not course:
            raise NotFoundError("Course not found.")

        categories = self._resolve_categories(db, course_in.category_ids)

        staged_key = None
        replaced_key = None
        try:
            course.title = course_in.title
            course.description = course_in.description
            course.difficulty = course_in.difficulty
            course.status = course_in.status
            crud_course.set_categories(db, course=course, categories=categories)

            if image is not None:
                if course.thumbnail is not None:
                    replaced_key = file_service.stage_replacement(
                        db, course.thumbnail, owner_id=owner_id, kind=StorageTypeEnum.IMAGE, upload=image
                    )
                    staged_key = course.thumbnail.key
                else:
                    thumbnail = file_service.create(db, owner_id=owner_id, kind=StorageTypeEnum.IMAGE, upload=image, commit=False)
                    staged_key = thumbnail.key
                    course.thumbnail = thumbnail

            db.commit()
        except Exception:
            db.rollback()
            if staged_key:
                file_service.discard_blob(staged_key)
            raise

        # the old blob goes only once the record points at the new one
        if replaced_key:
            file_service.discard_blob(replaced_key)

        db.refresh(course)
        cache_invalidator.invalidate_catalog()
        logger.info(f"Admin {owner_id} updated course {course.id}")
        return CourseSchema.model_validate(course)

    def delete_course(self, db: Session, course_id: int, owner_id: int) -> CourseSchema:
        course = crud_course.get_for_owner(db, id=course_id, admin_id=owner_id)
        if not course:
            raise NotFoundError("Course not found.")

        removed_file = None
        try:
            thumbnail = course.thumbnail
            if thumbnail is not None:
                course.thumbnail = None
                removed_file = file_service.delete(
                    db, file_id=thumbnail.id, owner_id=owner_id, kind=StorageTypeEnum.IMAGE, commit=False
                )

            crud_course.delete(db, id=course.id, commit=False)
            deleted_course = CourseSchema.model_validate(course)
            db.commit()
        except Exception:
            db.rollback()
            raise

        if removed_file is not None:
            file_service.discard_blob(removed_file.key)

        cache_invalidator.invalidate_catalog()
        logger.info(f"Admin {owner_id} deleted course {course_id}")
        return deleted_course

    def subscribe(self, db: Session, course_id: int, student_id: int) -> CourseSchema:
        course = crud_course.get(db, id=course_id)
        if not course or course.status != CourseStatusEnum.ACTIVE:
            raise NotFoundError("Course not found.")

        student = crud_user.get(db, id=student_id)
        if not student or student.role != RoleEnum.STUDENT:
            raise NotFoundError("Student not found.")

        if crud_course.is_subscribed(db, course_id=course_id, user_id=student_id):
            raise ConflictError("You are already subscribed to this course.")

        crud_course.add_subscriber(db, course=course, user=student)
        db.commit()

        cache_invalidator.invalidate_catalog()
        return CourseSchema.model_validate(course)

    def unsubscribe(self, db: Session, course_id: int, student_id: int) -> CourseSchema:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise NotFoundError("Course not found.")

        if not crud_course.is_subscribed(db, course_id=course_id, user_id=student_id):
            raise NotFoundError("You are not subscribed to this course.")

        student = crud_user.get(db, id=student_id)
        crud_course.remove_subscriber(db, course=course, user=student)
        db.commit()

        cache_invalidator.invalidate_catalog()
        return CourseSchema.model_validate(course)

course_service = CourseService()
