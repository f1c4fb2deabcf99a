"""
backend/app/services/user_repository.py

Purpose:
    Persistence access layer for user accounts, including conditional
    (compare-and-swap) balance updates used by the wager ledger.

Dependencies:
    - app.database
    - app.utils
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

import app.database as _db
from app.utils import utcnow


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id, returning None for anything that is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class UserRepository:
    async def get_by_id(self, user_id: str) -> Optional[dict]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await _db.db.users.find_one({"_id": oid})

    async def get_by_email(self, email: str) -> Optional[dict]:
        return await _db.db.users.find_one({"email": email.lower()})

    async def get_by_username_or_email(self, value: str) -> Optional[dict]:
        return await _db.db.users.find_one({"$or": [{"username": value}, {"email": value}]})

    async def get_many(self, user_ids: Iterable[str]) -> dict[str, dict]:
        oids = [oid for oid in (to_object_id(uid) for uid in set(user_ids)) if oid is not None]
        if not oids:
            return {}
        docs = await _db.db.users.find(
            {"_id": {"$in": oids}},
            {"username": 1, "full_name": 1},
        ).to_list(length=len(oids))
        return {str(doc["_id"]): doc for doc in docs}

    async def insert(self, doc: dict) -> dict:
        result = await _db.db.users.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def touch_last_login(self, user_id: ObjectId) -> None:
        now = utcnow()
        await _db.db.users.update_one(
            {"_id": user_id},
            {"$set": {"last_login": now, "updated_at": now}},
        )

    async def debit_balance(self, user_id: str, amount: float) -> Optional[dict]:
        """Atomically subtract amount if the tracked balance covers it.

        Returns the updated user, or None when the balance is untracked,
        too low, or the user is gone.
        """
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await _db.db.users.find_one_and_update(
            {"_id": oid, "balance": {"$gte": amount}},
            {"$inc": {"balance": -amount}, "$set": {"updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    async def credit_balance(self, user_id: str, amount: float) -> Optional[dict]:
        """Add amount to a tracked balance. Untracked or missing users are left alone."""
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return await _db.db.users.find_one_and_update(
            {"_id": oid, "balance": {"$ne": None}},
            {"$inc": {"balance": amount}, "$set": {"updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    async def list_page(self, skip: int, limit: int) -> tuple[list[dict], int]:
        docs = await _db.db.users.find(
            {}, {"hashed_password": 0},
        ).sort("created_at", -1).skip(skip).limit(limit).to_list(length=limit)
        total = await _db.db.users.count_documents({})
        return docs, total

    async def search(self, term: str, limit: int = 20) -> list[dict]:
        pattern = {"$regex": re.escape(term), "$options": "i"}
        return await _db.db.users.find(
            {"$or": [{"username": pattern}, {"full_name": pattern}]},
            {"hashed_password": 0},
        ).limit(limit).to_list(length=limit)
