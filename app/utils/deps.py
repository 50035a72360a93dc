import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from app.core.database import SessionLocal
from app.core.constants import RoleEnum
from app.core.exceptions import UnauthorizedError, ForbiddenError
from app.core.security import decode_access_token
from app.crud.user import user as user_crud
from app.models.user import User
from app.schemas.token import TokenPayload

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

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

def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)
) -> User:
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    try:
        payload = decode_access_token(credentials.credentials)
        token_data = TokenPayload(**payload)
    except JWTError:
        raise UnauthorizedError("Could not validate credentials")
    except ValidationError:
        raise UnauthorizedError("Invalid token payload")

    if not token_data.sub or not token_data.sub.isdigit():
        raise UnauthorizedError("Invalid token payload")

    user = user_crud.get(db, id=int(token_data.sub))
    if not user:
        raise UnauthorizedError("User not found")

    if not user.is_active:
        raise ForbiddenError("User account is inactive")

    return user

def require_role(*roles: RoleEnum):
    """Dependency factory that only lets the given roles through."""
    def _verify_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.info(f"User {current_user.id} with role {current_user.role.value} denied; requires {[r.value for r in roles]}")
            raise ForbiddenError("You do not have permission to perform this action.")
        return current_user
    return _verify_role
