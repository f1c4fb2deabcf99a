"""
backend/app/services/user_service.py

Purpose:
    Admin-side account management: paged listing (newest first),
    case-insensitive search on username or full name, and creation of
    accounts with a role mapped from the requested user type.

Dependencies:
    - app.services.user_repository
    - app.services.auth_service
"""

import logging
import math

from app.errors import ConflictError, ValidationError
from app.models.user import AdminUserCreate, UserRole
from app.services.auth_service import new_user_doc
from app.services.user_repository import UserRepository

logger = logging.getLogger("bibet.user_service")

_users = UserRepository()


async def list_users(page: int, limit: int) -> dict:
    page = max(page, 1)
    limit = max(limit, 1)
    users, total = await _users.list_page(skip=(page - 1) * limit, limit=limit)
    total_pages = math.ceil(total / limit)
    return {
        "users": users,
        "pagination": {
            "currentPage": page,
            "totalPages": total_pages,
            "totalUsers": total,
            "hasNext": page < total_pages,
            "hasPrev": page > 1,
        },
    }


async def search_users(term: str) -> list[dict]:
    if not term:
        raise ValidationError("Search term is required")
    return await _users.search(term)


async def create_user(body: AdminUserCreate, created_by: str) -> dict:
    if await _users.get_by_username_or_email(body.username):
        raise ConflictError("User with this username already exists")

    # Admin-created accounts get a placeholder email derived from the username
    user = await _users.insert(new_user_doc(
        email=f"{body.username}@temp.com",
        password=body.password,
        full_name=body.full_name or body.username,
        username=body.username,
        role=UserRole.admin if body.type == "Admin" else UserRole.user,
        is_active=body.is_active,
        balance=body.balance,
    ))
    logger.info("User %s created by admin %s", user["_id"], created_by)
    return user
