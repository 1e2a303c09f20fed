from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import CourseLevelEnum, CourseStatusEnum, RoleEnum
from app.schemas.course import Course, CourseCreate, CoursePage, CatalogFilters
from app.schemas.response import APIResponse
from app.schemas.user import UserContext
from app.services.course import course_service
from app.utils import deps
from app.utils.permission import PermissionHelper as permission_helper
from app.utils.uploads import read_image_upload

router = APIRouter()


def course_form(
    title: str = Form(..., min_length=1, max_length=255),
    description: Optional[str] = Form(None),
    difficulty: CourseLevelEnum = Form(CourseLevelEnum.BEGINNER),
    course_status: CourseStatusEnum = Form(CourseStatusEnum.ACTIVE, alias="status"),
    category_ids: Optional[List[int]] = Form(None),
) -> CourseCreate:
    try:
        return CourseCreate(
            title=title,
            description=description,
            difficulty=difficulty,
            status=course_status,
            category_ids=category_ids or [],
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))


def catalog_filters(
    title: Optional[str] = Query(None, max_length=255),
    category_ids: Optional[List[int]] = Query(None),
    difficulty: Optional[CourseLevelEnum] = Query(None),
    subscribed: bool = Query(False),
) -> CatalogFilters:
    return CatalogFilters(title=title, category_ids=category_ids, difficulty=difficulty, subscribed_only=subscribed)


@router.get("/", response_model=APIResponse[CoursePage])
def fetch_courses(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    filters: CatalogFilters = Depends(catalog_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    scope = permission_helper.catalog_scope_for(context)
    courses = course_service.fetch_catalog(db, filters=filters, scope=scope, page=page, page_size=limit)
    return APIResponse(message="Courses fetched successfully", data=courses)


@router.get("/visitor", response_model=APIResponse[CoursePage])
def fetch_courses_for_visitor(
    db: Session = Depends(deps.get_db),
    filters: CatalogFilters = Depends(catalog_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
):
    scope = permission_helper.catalog_scope_for(None)
    courses = course_service.fetch_catalog(db, filters=filters.model_copy(update={"subscribed_only": False}), scope=scope, page=page, page_size=limit)
    return APIResponse(message="Courses fetched successfully", data=courses)


@router.get("/{course_id}", response_model=APIResponse[Course])
def read_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    course = course_service.get_course(db, course_id=course_id, admin_id=permission_helper.owner_scope_for(context))
    return APIResponse(message="Course fetched successfully", data=course)


@router.post("/", response_model=APIResponse[Course], status_code=status.HTTP_201_CREATED)
async def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate = Depends(course_form),
    file: Optional[UploadFile] = File(None),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    image = await read_image_upload(file)
    new_course = course_service.create_course(db, course_in=course_in, owner_id=context.user_id, image=image)
    return APIResponse(message="Course created successfully", data=new_course)


@router.put("/{course_id}", response_model=APIResponse[Course])
async def update_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    course_in: CourseCreate = Depends(course_form),
    file: Optional[UploadFile] = File(None),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    image = await read_image_upload(file)
    updated_course = course_service.update_course(db, course_id=course_id, course_in=course_in, owner_id=context.user_id, image=image)
    return APIResponse(message="Course updated successfully", data=updated_course)


@router.delete("/{course_id}", response_model=APIResponse[Course])
def delete_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    deleted_course = course_service.delete_course(db, course_id=course_id, owner_id=context.user_id)
    return APIResponse(message="Course deleted successfully", data=deleted_course)


@router.post("/{course_id}/subscription", response_model=APIResponse[Course])
def subscribe_to_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.STUDENT))
):
    course = course_service.subscribe(db, course_id=course_id, student_id=context.user_id)
    return APIResponse(message="Subscribed to course successfully", data=course)


@router.delete("/{course_id}/subscription", response_model=APIResponse[Course])
def unsubscribe_from_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.STUDENT))
):
    course = course_service.unsubscribe(db, course_id=course_id, student_id=context.user_id)
    return APIResponse(message="Unsubscribed from course successfully", data=course)
