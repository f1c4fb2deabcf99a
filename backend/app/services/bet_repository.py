"""
backend/app/services/bet_repository.py

Purpose:
    Persistence access layer for wagers: inserts, owner-scoped listing,
    the pending -> cancelled conditional transition, open bets per match
    and per-status aggregation.

Dependencies:
    - app.database
    - app.services.user_repository
"""

from __future__ import annotations

from typing import Any, Optional

from pymongo import ReturnDocument

import app.database as _db
from app.models.bet import OPEN_STATUSES, BetStatus
from app.services.user_repository import to_object_id
from app.utils import utcnow


class BetRepository:
    async def insert(self, doc: dict[str, Any]) -> dict[str, Any]:
        result = await _db.db.bets.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def find_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        match_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[dict]:
        query: dict[str, Any] = {"user_id": user_id}
        if status:
            query["status"] = status
        if match_id:
            query["match_id"] = match_id
        return await _db.db.bets.find(query).sort("placed_at", -1).limit(limit).to_list(length=limit)

    async def cancel_pending(self, bet_id: str, user_id: str) -> Optional[dict]:
        """Flip an owned pending bet to cancelled in one conditional update.

        Returns the cancelled bet, or None when no owned pending bet matches.
        """
        oid = to_object_id(bet_id)
        if oid is None:
            return None
        return await _db.db.bets.find_one_and_update(
            {"_id": oid, "user_id": user_id, "status": BetStatus.pending.value},
            {"$set": {"status": BetStatus.cancelled.value, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    async def find_open_for_match(self, match_id: str) -> list[dict]:
        return await _db.db.bets.find(
            {"match_id": match_id, "status": {"$in": list(OPEN_STATUSES)}},
        ).to_list(length=None)

    async def summarize_by_status(self, user_id: str) -> list[dict]:
        pipeline = [
            {"$match": {"user_id": user_id}},
            {"$group": {
                "_id": "$status",
                "count": {"$sum": 1},
                "total_stake": {"$sum": "$stake"},
                "total_payout": {"$sum": "$payout"},
            }},
            {"$sort": {"_id": 1}},
        ]
        return await _db.db.bets.aggregate(pipeline).to_list(length=None)
