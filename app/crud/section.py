from sqlalchemy.orm import Session, aliased
from sqlalchemy import insert, select, literal, true
from typing import List, Optional, Tuple

from app.crud.base import CRUDBase
from app.models.section import Section, SectionClosure
from app.schemas.section import SectionCreate, SectionUpdate

CLOSURE_COLUMNS = ["ancestor_id", "descendant_id", "depth"]


class CRUDSection(CRUDBase[Section, SectionCreate, SectionUpdate]):

    def get_in_course(self, db: Session, *, id: int, course_id: int) -> Optional[Section]:
        return db.query(Section).filter(Section.id == id, Section.course_id == course_id).first()

    def get_by_course(self, db: Session, *, course_id: int) -> List[Section]:
        return db.query(Section).filter(Section.course_id == course_id).order_by(Section.id).all()

    def get_child_edges(self, db: Session, *, course_id: int) -> List[Tuple[int, int]]:
        rows = (
            db.query(SectionClosure.ancestor_id, SectionClosure.descendant_id)
            .join(Section, Section.id == SectionClosure.descendant_id)
            .filter(Section.course_id == course_id, SectionClosure.depth == 1)
            .order_by(SectionClosure.descendant_id)
            .all()
        )
        return [(row.ancestor_id, row.descendant_id) for row in rows]

    def add_closure_rows(self, db: Session, *, section: Section) -> None:
        """Self row plus one row per ancestor of the parent, one level deeper."""
        db.execute(insert(SectionClosure).values(ancestor_id=section.id, descendant_id=section.id, depth=0))
        if section.parent_id is not None:
            ancestors = select(
                SectionClosure.ancestor_id,
                literal(section.id),
                SectionClosure.depth + 1,
            ).where(SectionClosure.descendant_id == section.parent_id)
            db.execute(insert(SectionClosure).from_select(CLOSURE_COLUMNS, ancestors))

    def subtree_ids(self, db: Session, *, section_id: int, for_update: bool = False) -> List[int]:
        query = (
            db.query(SectionClosure.descendant_id)
            .filter(SectionClosure.ancestor_id == section_id)
            .order_by(SectionClosure.depth, SectionClosure.descendant_id)
        )
        if for_update:
            # row locks serialize concurrent rewrites of overlapping subtrees
            query = query.with_for_update()
        rows = query.all()
        return [row.descendant_id for row in rows]

    def path_ids(self, db: Session, *, section_id: int, for_update: bool = False) -> List[int]:
        """Ids from ``section_id`` up to its root, itself first."""
        query = (
            db.query(SectionClosure.ancestor_id)
            .filter(SectionClosure.descendant_id == section_id)
            .order_by(SectionClosure.depth)
        )
        if for_update:
            query = query.with_for_update()
        rows = query.all()
        return [row.ancestor_id for row in rows]

    def has_children(self, db: Session, *, section_id: int) -> bool:
        return db.query(SectionClosure).filter(
            SectionClosure.ancestor_id == section_id,
            SectionClosure.depth == 1,
        ).first() is not None

    def detach_subtree(self, db: Session, *, subtree_ids: List[int]) -> int:
        """Drop every row linking an outside ancestor to a node of the subtree."""
        return (
            db.query(SectionClosure)
            .filter(
                SectionClosure.descendant_id.in_(subtree_ids),
                SectionClosure.ancestor_id.notin_(subtree_ids),
            )
            .delete(synchronize_session=False)
        )

    def attach_subtree(self, db: Session, *, section_id: int, parent_id: int) -> None:
        """Pair every ancestor of the new parent with every node of the subtree, keeping relative depths."""
        above = aliased(SectionClosure)
        below = aliased(SectionClosure)
        rows = select(
            above.ancestor_id,
            below.descendant_id,
            above.depth + below.depth + 1,
        ).select_from(above).join(below, true()).where(
            above.descendant_id == parent_id,
            below.ancestor_id == section_id,
        )
        db.execute(insert(SectionClosure).from_select(CLOSURE_COLUMNS, rows))

    def remove_subtree(self, db: Session, *, subtree_ids: List[int]) -> int:
        db.query(SectionClosure).filter(
            SectionClosure.descendant_id.in_(subtree_ids)
        ).delete(synchronize_session=False)
        return db.query(Section).filter(Section.id.in_(subtree_ids)).delete(synchronize_session=False)

    def get_descendants(self, db: Session, *, section_id: int) -> List[Section]:
        return (
            db.query(Section)
            .join(SectionClosure, SectionClosure.descendant_id == Section.id)
            .filter(SectionClosure.ancestor_id == section_id, SectionClosure.depth > 0)
            .order_by(SectionClosure.depth, Section.id)
            .all()
        )

    def get_ancestors(self, db: Session, *, section_id: int) -> List[Section]:
        return (
            db.query(Section)
            .join(SectionClosure, SectionClosure.ancestor_id == Section.id)
            .filter(SectionClosure.descendant_id == section_id, SectionClosure.depth > 0)
            .order_by(SectionClosure.depth, Section.id)
            .all()
        )


section = CRUDSection(Section)
