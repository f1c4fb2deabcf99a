import logging

import app.database as _db
from app.config import settings
from app.models.user import UserRole
from app.services.auth_service import new_user_doc

logger = logging.getLogger("bibet.seed")


async def seed_initial_user() -> None:
    """Create the seed admin user if configured via env."""
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        logger.debug("SEED_ADMIN_EMAIL not set, skipping seed")
        return

    email = settings.SEED_ADMIN_EMAIL.lower()
    existing_user = await _db.db.users.find_one({"email": email})
    if existing_user:
        if existing_user.get("role") != UserRole.admin.value:
            await _db.db.users.update_one(
                {"_id": existing_user["_id"]},
                {"$set": {"role": UserRole.admin.value}},
            )
            logger.info("Seed user promoted to admin")
        else:
            logger.info("Seed user already exists, skipping")
        return

    user_doc = new_user_doc(
        email=email,
        password=settings.SEED_ADMIN_PASSWORD,
        full_name="Administrator",
        username="admin",
        role=UserRole.admin,
        balance=settings.INITIAL_BALANCE,
    )
    result = await _db.db.users.insert_one(user_doc)
    logger.info("Seed user created (admin): %s", result.inserted_id)
