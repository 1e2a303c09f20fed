from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.category import Category, CategoryCreate, CategoryUpdate
from app.schemas.response import APIResponse
from app.schemas.user import UserContext
from app.services.category import category_service
from app.utils import deps

router = APIRouter()


@router.get("/", response_model=APIResponse[List[Category]])
def read_categories(
    db: Session = Depends(deps.get_db),
    title: Optional[str] = Query(None, max_length=255),
):
    categories = category_service.get_categories(db, title=title)
    return APIResponse(message="Categories fetched successfully", data=categories)


@router.post("/", response_model=APIResponse[Category], status_code=status.HTTP_201_CREATED)
def create_category(
    *,
    db: Session = Depends(deps.get_transactional_db),
    category_in: CategoryCreate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    new_category = category_service.create_category(db, category_in=category_in, admin_id=context.user_id)
    return APIResponse(message="Category created successfully", data=new_category)


@router.put("/{category_id}", response_model=APIResponse[Category])
def update_category(
    *,
    db: Session = Depends(deps.get_transactional_db),
    category_id: int,
    category_in: CategoryUpdate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    updated_category = category_service.update_category(db, category_id=category_id, category_in=category_in)
    return APIResponse(message="Category updated successfully", data=updated_category)


@router.delete("/{category_id}", response_model=APIResponse[Category])
def delete_category(
    *,
    db: Session = Depends(deps.get_transactional_db),
    category_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    deleted_category = category_service.delete_category(db, category_id=category_id)
    return APIResponse(message="Category deleted successfully", data=deleted_category)
