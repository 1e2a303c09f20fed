from typing import Optional
from fastapi import HTTPException, status

from app.core.constants import CatalogVisibilityEnum, RoleEnum
from app.schemas.course import CatalogScope
from app.schemas.user import UserContext


class PermissionHelper:
    @staticmethod
    def is_admin(context: Optional[UserContext]) -> bool:
        return context is not None and context.role == RoleEnum.ADMIN

    @staticmethod
    def is_student(context: Optional[UserContext]) -> bool:
        return context is not None and context.role == RoleEnum.STUDENT

    @staticmethod
    def require_role(context: UserContext, *roles: RoleEnum, message: str = "You do not have permission to perform this action."):
        if context.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=message)

    @staticmethod
    def catalog_scope_for(context: Optional[UserContext]) -> CatalogScope:
        """Administrators see their own courses, students the subscription view, anyone else the public one."""
        if PermissionHelper.is_admin(context):
            return CatalogScope(visibility=CatalogVisibilityEnum.UNSCOPED, user_id=context.user_id)
        if PermissionHelper.is_student(context):
            return CatalogScope(visibility=CatalogVisibilityEnum.SCOPED_BY_SUBSCRIPTION, user_id=context.user_id)
        return CatalogScope(visibility=CatalogVisibilityEnum.PUBLIC)

    @staticmethod
    def owner_scope_for(context: UserContext) -> Optional[int]:
        """Administrator id when reads must be limited to owned courses, otherwise None."""
        return context.user_id if PermissionHelper.is_admin(context) else None
