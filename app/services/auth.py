import logging
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.core.exceptions import ConflictError, ForbiddenError, UnauthorizedError
from app.core.security import verify_password, create_access_token
from app.crud.user import user as crud_user
from app.schemas.token import LoginResponse, Token
from app.schemas.user import UserCreate, User as UserSchema

logger = logging.getLogger(__name__)


class AuthService:
    def _token_response(self, user) -> LoginResponse:
        access_token = create_access_token(user_id=user.id, role=user.role.value)
        return LoginResponse(
            token=Token(access_token=access_token, token_type="bearer"),
            user=UserSchema.model_validate(user)
        )

    def register(self, db: Session, *, user_in: UserCreate) -> LoginResponse:
        if user_in.role == RoleEnum.ADMIN:
            raise ForbiddenError("Admin accounts cannot be self-registered")

        if crud_user.get_by_email(db, email=user_in.email):
            raise ConflictError("User already exists with this email")

        user = crud_user.create_with_password(db, obj_in=user_in)
        logger.info(f"Registered user {user.id} as {user.role.value}")
        return self._token_response(user)

    def login(self, db: Session, *, email: str, password: str) -> LoginResponse:
        user = crud_user.get_by_email(db, email=email)
        if not user or not verify_password(password, user.hashed_password):
            raise UnauthorizedError("Incorrect email or password")

        if not user.is_active:
            raise UnauthorizedError("User is inactive")

        return self._token_response(user)


auth_service = AuthService()
