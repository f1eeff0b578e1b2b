"""User router - Account registration, profile and admin user management"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import Role, User
from .schemas import AdminCheckResponse, UserProfileUpdate, UserResponse, UserSignup
from .service import UserService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("/check-admin", response_model=AdminCheckResponse)
async def check_admin(service: UserService = Depends(get_user_service)):
    """Whether the one-off ADMIN account has been created"""
    count = service.count_admins()
    return AdminCheckResponse(adminExists=count > 0, adminCount=count)


@router.post("/signup", response_model=UserResponse, status_code=201)
async def signup(data: UserSignup, service: UserService = Depends(get_user_service)):
    return service.register(data)


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    return user


@router.put("/update-profile", response_model=UserResponse)
async def update_profile(
    data: UserProfileUpdate,
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return service.update_profile(user, data)


@router.get("/users", response_model=list[UserResponse])
async def list_customers(
    _admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.list_by_role(Role.USER)


@router.get("/technicians", response_model=list[UserResponse])
async def list_technician_users(
    _admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    return service.list_by_role(Role.TECHNICIAN)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id, admin)
    return {"success": True, "message": "User deleted successfully"}
