import logging

from fastapi import APIRouter, Depends, status

from app.models.user import UserCreate, UserLogin, user_to_response
from app.services.auth_service import (
    authenticate,
    create_access_token,
    get_current_user,
    register_user,
)

logger = logging.getLogger("bibet.auth")
router = APIRouter(prefix="/api/auth", tags=["auth"])


def _session_payload(user: dict) -> dict:
    return {"user": user_to_response(user), "token": create_access_token(str(user["_id"]))}


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: UserCreate):
    """Register a new account and sign it in."""
    user = await register_user(body.full_name, body.email, body.password)
    return {
        "success": True,
        "message": "User registered successfully",
        "data": _session_payload(user),
    }


@router.post("/login")
async def login(body: UserLogin):
    user = await authenticate(body.email, body.password)
    logger.info("Login: %s", user["_id"])
    return {
        "success": True,
        "message": "Login successful",
        "data": _session_payload(user),
    }


@router.get("/profile")
async def profile(user=Depends(get_current_user)):
    return {
        "success": True,
        "message": "Profile retrieved successfully",
        "data": {"user": user_to_response(user)},
    }


@router.get("/verify")
async def verify(user=Depends(get_current_user)):
    """Confirm the bearer token is still valid."""
    return {
        "success": True,
        "message": "Token is valid",
        "data": {"user": user_to_response(user)},
    }


@router.post("/logout")
async def logout(user=Depends(get_current_user)):
    """Tokens are stateless; the client discards its copy."""
    return {"success": True, "message": "Logout successful"}
