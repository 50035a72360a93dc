from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.schemas.token import LoginRequest, LoginResponse
from app.schemas.user import UserCreate
from app.services.auth import auth_service
from app.utils import deps

router = APIRouter()


@router.post("/register", response_model=APIResponse[LoginResponse], status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserCreate
):
    """Creates a student or instructor account and returns a bearer token for it."""
    result = auth_service.register(db, user_in=user_in)
    return APIResponse(message="User registered successfully", data=result)


@router.post("/login", response_model=APIResponse[LoginResponse])
def login_for_access_token(
    request: LoginRequest,
    db: Session = Depends(deps.get_db)
):
    result = auth_service.login(db, email=request.email, password=request.password)
    return APIResponse(message="Login successful", data=result)
