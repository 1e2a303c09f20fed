import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, InvalidOperationError
from app.crud.course import course as crud_course
from app.crud.section import section as crud_section
from app.models.course import Course
from app.models.section import Section as SectionModel
from app.schemas.section import SectionCreate, SectionUpdate, Section as SectionSchema, SectionTree

logger = logging.getLogger(__name__)


class SectionService:
    """Section forests of courses, kept as a closure table.

    Every section has a depth-0 row pointing at itself and one row per
    ancestor; each mutation rewrites the affected rows in a single transaction.
    """

    def _get_course(self, db: Session, course_id: int, owner_id: Optional[int] = None) -> Course:
        course = crud_course.get_for_owner(db, id=course_id, admin_id=owner_id)
        if not course:
            raise NotFoundError("Course not found.")
        return course

    def _get_section(self, db: Session, section_id: int, owner_id: Optional[int] = None) -> SectionModel:
        section = crud_section.get(db, id=section_id)
        if not section:
            raise NotFoundError("Section not found.")
        # sections of a deleted course go with it
        self._get_course(db, section.course_id, owner_id)
        return section

    def get_section(self, db: Session, section_id: int) -> SectionSchema:
        return SectionSchema.model_validate(self._get_section(db, section_id))

    def insert(self, db: Session, section_in: SectionCreate, owner_id: Optional[int] = None) -> SectionSchema:
        course = self._get_course(db, section_in.course_id, owner_id)

        if section_in.parent_id is not None:
            parent = crud_section.get_in_course(db, id=section_in.parent_id, course_id=course.id)
            if not parent:
                raise NotFoundError("Parent section not found in this course.")

        try:
            new_section = crud_section.create(db, obj_in=section_in.model_dump(), commit=False)
            crud_section.add_closure_rows(db, section=new_section)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(new_section)
        logger.info(f"Inserted section {new_section.id} into course {course.id} under {section_in.parent_id}")
        return SectionSchema.model_validate(new_section)

    def update(self, db: Session, section_id: int, section_in: SectionUpdate, owner_id: Optional[int] = None) -> SectionSchema:
        section = self._get_section(db, section_id, owner_id)
        update_data = {
            field: value
            for field, value in section_in.model_dump(exclude_unset=True).items()
            if value is not None or field == "objective"
        }
        updated_section = crud_section.update(db, db_obj=section, obj_in=update_data)
        return SectionSchema.model_validate(updated_section)

    def move(self, db: Session, section_id: int, new_parent_id: Optional[int], owner_id: Optional[int] = None) -> SectionSchema:
        section = self._get_section(db, section_id, owner_id)
        if section.parent_id == new_parent_id:
            return SectionSchema.model_validate(section)

        if new_parent_id is not None:
            parent = crud_section.get_in_course(db, id=new_parent_id, course_id=section.course_id)
            if not parent:
                raise NotFoundError("Parent section not found in this course.")

        try:
            # lock the moving subtree and the new parent's path before checking for a cycle
            subtree_ids = crud_section.subtree_ids(db, section_id=section.id, for_update=True)
            if new_parent_id is not None:
                parent_path = crud_section.path_ids(db, section_id=new_parent_id, for_update=True)
                if section.id in parent_path:
                    raise InvalidOperationError("A section cannot be moved under itself or one of its descendants.")
            crud_section.detach_subtree(db, subtree_ids=subtree_ids)
            if new_parent_id is not None:
                crud_section.attach_subtree(db, section_id=section.id, parent_id=new_parent_id)
            section.parent_id = new_parent_id
            db.add(section)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(section)
        logger.info(f"Moved section {section.id} ({len(subtree_ids)} nodes) under {new_parent_id}")
        return SectionSchema.model_validate(section)

    def delete(self, db: Session, section_id: int, cascade: bool = False, owner_id: Optional[int] = None) -> List[int]:
        section = self._get_section(db, section_id, owner_id)

        if not cascade and crud_section.has_children(db, section_id=section.id):
            raise InvalidOperationError("Section has child sections; delete them first or delete with cascade.")

        try:
            subtree_ids = crud_section.subtree_ids(db, section_id=section.id, for_update=True)
            crud_section.remove_subtree(db, subtree_ids=subtree_ids)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Deleted sections {subtree_ids}")
        return subtree_ids

    def descendants(self, db: Session, section_id: int) -> List[SectionSchema]:
        section = self._get_section(db, section_id)
        return [SectionSchema.model_validate(s) for s in crud_section.get_descendants(db, section_id=section.id)]

    def ancestors(self, db: Session, section_id: int) -> List[SectionSchema]:
        section = self._get_section(db, section_id)
        return [SectionSchema.model_validate(s) for s in crud_section.get_ancestors(db, section_id=section.id)]

    def tree(self, db: Session, course_id: int) -> List[SectionTree]:
        course = self._get_course(db, course_id)
        nodes = {
            s.id: SectionTree(**SectionSchema.model_validate(s).model_dump())
            for s in crud_section.get_by_course(db, course_id=course.id)
        }

        child_ids = set()
        for parent_id, child_id in crud_section.get_child_edges(db, course_id=course.id):
            nodes[parent_id].children.append(nodes[child_id])
            child_ids.add(child_id)

        return [node for node_id, node in nodes.items() if node_id not in child_ids]

section_service = SectionService()
