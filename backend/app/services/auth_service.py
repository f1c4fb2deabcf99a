import logging
import secrets
from datetime import timedelta
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError
from fastapi import Depends, Request
import jwt
from jwt.exceptions import InvalidTokenError as JWTError

from app.config import settings
from app.errors import AuthenticationError, ConflictError, PermissionDeniedError
from app.models.user import UserInDB, UserRole
from app.services.user_repository import UserRepository
from app.utils import utcnow

logger = logging.getLogger("bibet.auth")
ph = PasswordHasher()

ALGORITHM = "HS256"

_users = UserRepository()


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    try:
        return ph.verify(hashed, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def create_access_token(user_id: str) -> str:
    expire = utcnow() + timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    payload = {
        "sub": user_id,
        "exp": expire,
        "type": "access",
        "jti": secrets.token_hex(8),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_jwt(token: str) -> dict:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])


def new_user_doc(
    *,
    email: str,
    password: str,
    full_name: str,
    username: Optional[str] = None,
    role: UserRole = UserRole.user,
    is_active: bool = True,
    balance: Optional[float] = None,
) -> dict:
    """Build a user document. A balance of None leaves the account untracked."""
    now = utcnow()
    doc = UserInDB(
        email=email.lower(),
        hashed_password=hash_password(password),
        full_name=full_name,
        username=username or None,
        role=role,
        is_active=is_active,
        balance=balance,
        created_at=now,
        updated_at=now,
    ).model_dump()
    # Sparse unique index on username; untracked accounts carry no balance field
    for optional in ("username", "balance"):
        if doc[optional] is None:
            del doc[optional]
    return doc


async def register_user(full_name: str, email: str, password: str) -> dict:
    """Create a self-registered account and stamp its first login."""
    if await _users.get_by_email(email):
        raise ConflictError("User with this email already exists")

    user = await _users.insert(new_user_doc(
        email=email,
        password=password,
        full_name=full_name,
        balance=settings.INITIAL_BALANCE,
    ))
    await _users.touch_last_login(user["_id"])
    logger.info("User registered: %s", user["_id"])
    return user


async def authenticate(email: str, password: str) -> dict:
    """Verify credentials; every failure reads the same to the caller."""
    user = await _users.get_by_email(email)
    if not user:
        raise AuthenticationError("Invalid email or password")
    if not user.get("is_active", True):
        raise AuthenticationError("Account is deactivated. Please contact support.")
    if not verify_password(password, user.get("hashed_password", "")):
        raise AuthenticationError("Invalid email or password")

    await _users.touch_last_login(user["_id"])
    user["last_login"] = utcnow()
    return user


def _token_from_request(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return request.cookies.get("access_token")


async def get_current_user(request: Request) -> dict:
    """FastAPI dependency: resolve the user from a bearer token."""
    token = _token_from_request(request)
    if not token:
        raise AuthenticationError("Access token required")

    try:
        payload = decode_jwt(token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except JWTError:
        raise AuthenticationError("Invalid token")

    if payload.get("type") != "access" or not payload.get("sub"):
        raise AuthenticationError("Invalid token")

    user = await _users.get_by_id(payload["sub"])
    if not user:
        raise AuthenticationError("User not found")
    if not user.get("is_active", True):
        raise AuthenticationError("Account is deactivated. Please contact support.")
    return user


async def get_admin_user(user: dict = Depends(get_current_user)) -> dict:
    """FastAPI dependency: requires an authenticated admin user."""
    if user.get("role") != UserRole.admin.value:
        raise PermissionDeniedError("Admin access required")
    return user
