"""Admin user management: list, search, create."""

from fastapi import APIRouter, Depends, Query, status

from app.models.user import AdminUserCreate, user_to_response
from app.services import user_service
from app.services.auth_service import get_admin_user

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin=Depends(get_admin_user),
):
    result = await user_service.list_users(page, limit)
    return {
        "success": True,
        "message": "Users retrieved successfully",
        "data": {
            "users": [user_to_response(u) for u in result["users"]],
            "pagination": result["pagination"],
        },
    }


@router.get("/search")
async def search_users(
    username: str = Query("", max_length=100),
    admin=Depends(get_admin_user),
):
    """Case-insensitive match on username or full name."""
    users = await user_service.search_users(username.strip())
    return {
        "success": True,
        "message": "Users retrieved successfully",
        "data": {"users": [user_to_response(u) for u in users]},
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(body: AdminUserCreate, admin=Depends(get_admin_user)):
    user = await user_service.create_user(body, created_by=str(admin["_id"]))
    return {
        "success": True,
        "message": "User created successfully",
        "data": {"user": user_to_response(user)},
    }
