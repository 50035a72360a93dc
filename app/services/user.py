import logging
import math
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.core.exceptions import BadRequestError, NotFoundError
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.user import UserUpdate, RoleUpdate, UserStatusUpdate, UserPagination

logger = logging.getLogger(__name__)


class UserService:
    def _get_or_raise(self, db: Session, user_id: int) -> User:
        user = crud_user.get(db, id=user_id)
        if not user or user.is_deleted:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, db: Session, *, current_user: User, user_in: UserUpdate) -> User:
        update_data = user_in.model_dump(exclude_unset=True)
        if not update_data:
            raise BadRequestError("At least one field must be provided for update")
        # current_user was loaded by the auth dependency in its own session
        user = crud_user.get(db, id=current_user.id)
        return crud_user.update(db, db_obj=user, obj_in=update_data)

    def update_role(self, db: Session, *, user_id: int, role_in: RoleUpdate) -> User:
        user = self._get_or_raise(db, user_id)

        logger.info(f"User {user.id} role {user.role.value} -> {role_in.role.value}")
        return crud_user.update(db, db_obj=user, obj_in={"role": role_in.role})

    def update_status(self, db: Session, *, user_id: int, status_in: UserStatusUpdate, current_user: User) -> User:
        user = self._get_or_raise(db, user_id)
        if user.id == current_user.id and not status_in.is_active:
            raise BadRequestError("You cannot deactivate your own account")

        logger.info(f"User {user.id} {'activated' if status_in.is_active else 'deactivated'} by {current_user.id}")
        return crud_user.update(db, db_obj=user, obj_in={"is_active": status_in.is_active})

    def delete_user(self, db: Session, *, user_id: int, current_user: User) -> User:
        """Soft delete; the row is kept and the account deactivated."""
        user = self._get_or_raise(db, user_id)
        if user.id == current_user.id:
            raise BadRequestError("You cannot delete your own account")

        user = crud_user.update(db, db_obj=user, obj_in={"is_deleted": True, "is_active": False})
        logger.info(f"User {user.id} deleted by {current_user.id}")
        return user

    def get_public_profile(self, db: Session, *, user_id: int) -> User:
        user = self._get_or_raise(db, user_id)
        if not user.is_active:
            raise NotFoundError("User not found")
        return user

    def get_instructors(self, db: Session) -> List[User]:
        return crud_user.get_instructors(db)

    def list_users(
        self,
        db: Session,
        *,
        page: int,
        limit: int,
        role: Optional[RoleEnum] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], UserPagination]:
        users, total = crud_user.get_filtered(db, skip=(page - 1) * limit, limit=limit, role=role, search=search)
        pagination = UserPagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_users=total,
            limit=limit,
        )
        return users, pagination


user_service = UserService()
