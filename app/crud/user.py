from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.core.security import get_password_hash
from app.crud.base import CRUDBase
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.lower()).first()

    def create_with_password(self, db: Session, *, obj_in: UserCreate) -> User:
        return self.create(db, obj_in={
            "full_name": obj_in.full_name,
            "email": obj_in.email.lower(),
            "hashed_password": get_password_hash(obj_in.password),
            "role": obj_in.role,
            "is_active": True,
        })

    def get_filtered(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 20,
        role: Optional[RoleEnum] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        query = db.query(User).filter(User.is_deleted.is_(False))
        if role is not None:
            query = query.filter(User.role == role)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))

        total = query.count()
        users = query.order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit).all()
        return users, total

    def get_instructors(self, db: Session) -> List[User]:
        return (
            db.query(User)
            .filter(User.role == RoleEnum.INSTRUCTOR)
            .filter(User.is_active.is_(True))
            .filter(User.is_deleted.is_(False))
            .order_by(User.full_name)
            .all()
        )


user = CRUDUser(User)
