from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.section import Section, SectionCreate, SectionMove, SectionTree, SectionUpdate
from app.schemas.user import UserContext
from app.services.section import section_service
from app.utils import deps

router = APIRouter()


@router.post("/", response_model=APIResponse[Section], status_code=status.HTTP_201_CREATED)
def create_section(
    *,
    db: Session = Depends(deps.get_transactional_db),
    section_in: SectionCreate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    new_section = section_service.insert(db, section_in=section_in, owner_id=context.user_id)
    return APIResponse(message="Section created successfully", data=new_section)


@router.get("/course/{course_id}", response_model=APIResponse[List[SectionTree]])
def read_course_sections(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    tree = section_service.tree(db, course_id=course_id)
    return APIResponse(message="Sections fetched successfully", data=tree)


@router.get("/{section_id}", response_model=APIResponse[Section])
def read_section(
    *,
    db: Session = Depends(deps.get_db),
    section_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    section = section_service.get_section(db, section_id=section_id)
    return APIResponse(message="Section fetched successfully", data=section)


@router.get("/{section_id}/descendants", response_model=APIResponse[List[Section]])
def read_section_descendants(
    *,
    db: Session = Depends(deps.get_db),
    section_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    descendants = section_service.descendants(db, section_id=section_id)
    return APIResponse(message="Descendants fetched successfully", data=descendants)


@router.get("/{section_id}/ancestors", response_model=APIResponse[List[Section]])
def read_section_ancestors(
    *,
    db: Session = Depends(deps.get_db),
    section_id: int,
    context: UserContext = Depends(deps.get_current_user_with_context)
):
    ancestors = section_service.ancestors(db, section_id=section_id)
    return APIResponse(message="Ancestors fetched successfully", data=ancestors)


@router.put("/{section_id}", response_model=APIResponse[Section])
def update_section(
    *,
    db: Session = Depends(deps.get_transactional_db),
    section_id: int,
    section_in: SectionUpdate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    updated_section = section_service.update(db, section_id=section_id, section_in=section_in, owner_id=context.user_id)
    return APIResponse(message="Section updated successfully", data=updated_section)


@router.put("/{section_id}/move", response_model=APIResponse[Section])
def move_section(
    *,
    db: Session = Depends(deps.get_transactional_db),
    section_id: int,
    move_in: SectionMove,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    moved_section = section_service.move(db, section_id=section_id, new_parent_id=move_in.parent_id, owner_id=context.user_id)
    return APIResponse(message="Section moved successfully", data=moved_section)


@router.delete("/{section_id}", response_model=APIResponse[List[int]])
def delete_section(
    *,
    db: Session = Depends(deps.get_transactional_db),
    section_id: int,
    cascade: bool = Query(False),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    deleted_ids = section_service.delete(db, section_id=section_id, cascade=cascade, owner_id=context.user_id)
    return APIResponse(message="Section deleted successfully", data=deleted_ids)
