from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from app.core.constants import RoleEnum
from app.core.database import SessionLocal
from app.core.security import decode_access_token
from app.crud.user import user as user_crud
from app.schemas.user import UserContext, User
from app.utils.permission import PermissionHelper

http_bearer = HTTPBearer()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_transactional_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_current_user_with_context(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer)
) -> UserContext:
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = user_crud.get(db, id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive"
        )

    return UserContext(user=User.model_validate(user), role=user.role)

def require_role(*roles: RoleEnum):
    """Dependency that resolves the caller and checks it holds one of the given roles."""
    def _verify_role(context: UserContext = Depends(get_current_user_with_context)) -> UserContext:
        PermissionHelper.require_role(context, *roles)
        return context
    return _verify_role
