from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_ID, MAX_PAGE
from app.models.user import User as UserModel
from app.schemas.response import APIResponse
from app.schemas.user import User, UserUpdate, RoleUpdate, UserStatusUpdate, PublicProfile, UserList
from app.services.user import user_service
from app.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[UserList])
def list_users(
    db: Session = Depends(deps.get_db),
    current_user: UserModel = Depends(deps.require_role(RoleEnum.ADMIN)),
    page: int = Query(1, ge=1, le=MAX_PAGE),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    role: Optional[RoleEnum] = None,
    search: Optional[str] = Query(None, max_length=100),
):
    users, pagination = user_service.list_users(db, page=page, limit=limit, role=role, search=search)
    return APIResponse(
        message="Users retrieved successfully",
        data=UserList(users=[User.model_validate(u) for u in users], pagination=pagination)
    )


@router.get("/profile", response_model=APIResponse[User])
def read_profile(current_user: UserModel = Depends(deps.get_current_user)):
    return APIResponse(message="Profile retrieved successfully", data=User.model_validate(current_user))


@router.put("/profile", response_model=APIResponse[User])
def update_profile(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserUpdate,
    current_user: UserModel = Depends(deps.get_current_user)
):
    user = user_service.update_profile(db, current_user=current_user, user_in=user_in)
    return APIResponse(message="Profile updated successfully", data=User.model_validate(user))


@router.get("/instructors", response_model=APIResponse[List[PublicProfile]])
def list_instructors(db: Session = Depends(deps.get_db)):
    instructors = user_service.get_instructors(db)
    return APIResponse(
        message="Instructors retrieved successfully",
        data=[PublicProfile.model_validate(i) for i in instructors]
    )


@router.get("/{user_id}", response_model=APIResponse[PublicProfile])
def read_user(
    *,
    db: Session = Depends(deps.get_db),
    user_id: int = Path(..., gt=0, le=MAX_ID)
):
    user = user_service.get_public_profile(db, user_id=user_id)
    return APIResponse(message="User retrieved successfully", data=PublicProfile.model_validate(user))


@router.put("/{user_id}/role", response_model=APIResponse[User])
def update_user_role(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_id: int = Path(..., gt=0, le=MAX_ID),
    role_in: RoleUpdate,
    current_user: UserModel = Depends(deps.require_role(RoleEnum.ADMIN))
):
    user = user_service.update_role(db, user_id=user_id, role_in=role_in)
    return APIResponse(message="User role updated successfully", data=User.model_validate(user))


@router.put("/{user_id}/status", response_model=APIResponse[User])
def update_user_status(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_id: int = Path(..., gt=0, le=MAX_ID),
    status_in: UserStatusUpdate,
    current_user: UserModel = Depends(deps.require_role(RoleEnum.ADMIN))
):
    user = user_service.update_status(db, user_id=user_id, status_in=status_in, current_user=current_user)
    message = "User activated successfully" if user.is_active else "User deactivated successfully"
    return APIResponse(message=message, data=User.model_validate(user))


@router.delete("/{user_id}", response_model=APIResponse[User])
def delete_user(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_id: int = Path(..., gt=0, le=MAX_ID),
    current_user: UserModel = Depends(deps.require_role(RoleEnum.ADMIN))
):
    deleted_user = user_service.delete_user(db, user_id=user_id, current_user=current_user)
    return APIResponse(message="User deleted successfully", data=User.model_validate(deleted_user))
