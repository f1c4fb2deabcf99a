"""
backend/app/database.py

Purpose:
    MongoDB connection bootstrap and index management for the users and
    bets collections.

Dependencies:
    - motor.motor_asyncio
    - app.config
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import settings

client: AsyncIOMotorClient = None
db: AsyncIOMotorDatabase = None

logger = logging.getLogger("bibet.database")


async def connect_db() -> None:
    global client, db
    client = AsyncIOMotorClient(
        settings.MONGO_URI,
        maxPoolSize=25,
        minPoolSize=5,
    )
    db = client[settings.MONGO_DB]
    await _ensure_indexes()
    logger.info("MongoDB connected: db=%s", settings.MONGO_DB)


async def close_db() -> None:
    global client
    if client:
        client.close()
        logger.info("MongoDB connection closed")


async def get_db() -> AsyncIOMotorDatabase:
    return db


async def _ensure_indexes() -> None:
    """Create indexes on startup. Idempotent."""

    # ---- Users ----
    await db.users.create_index("email", unique=True)
    await db.users.create_index("username", unique=True, sparse=True)

    # ---- Bets ----
    await db.bets.create_index([("user_id", 1), ("status", 1)])
    await db.bets.create_index([("match_id", 1), ("status", 1)])
    await db.bets.create_index([("placed_at", -1)])
