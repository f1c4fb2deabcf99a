"""
backend/tests/test_market_service.py

Purpose:
    Market view for a match: open bets grouped by runner and side, with
    bettor names resolved and cancelled bets left out.
"""

from __future__ import annotations

import sys

import pytest
from bson import ObjectId

sys.path.insert(0, "backend")

from app.services.market_service import MarketAggregator


def _bet(user_id: str, runner: str, bet_type: str, odds: float, stake: float, status: str = "pending", **extra):
    return {
        "_id": ObjectId(),
        "user_id": user_id,
        "match_id": "m1",
        "runner": runner,
        "bet_type": bet_type,
        "odds": odds,
        "stake": stake,
        "unmatched_amount": stake,
        "status": status,
        **extra,
    }


@pytest.mark.asyncio
async def test_market_groups_open_bets_by_runner_and_side(fake_db):
    alice, bob = ObjectId(), ObjectId()
    fake_db.users.docs.extend([
        {"_id": alice, "email": "a@example.com", "username": "alice", "full_name": "Alice A"},
        {"_id": bob, "email": "b@example.com", "full_name": "Bob B"},
    ])
    fake_db.bets.docs.extend([
        _bet(str(alice), "India", "back", 2.0, 50),
        _bet(str(bob), "India", "lay", 2.2, 30, status="matched"),
        _bet(str(bob), "Australia", "back", 1.8, 20),
        _bet(str(alice), "India", "back", 3.0, 99, status="cancelled"),
        {**_bet(str(alice), "India", "back", 2.0, 10), "match_id": "m2"},
    ])

    market = await MarketAggregator().get_match_market("m1")

    assert market["total_bets"] == 3
    india = market["market_data"]["India"]
    assert india["back"] == [{"odds": 2.0, "amount": 50, "user_id": str(alice), "username": "alice"}]
    assert india["lay"] == [{"odds": 2.2, "amount": 30, "user_id": str(bob), "username": "Bob B"}]
    assert market["market_data"]["Australia"]["lay"] == []


@pytest.mark.asyncio
async def test_market_for_unknown_match_is_empty(fake_db):
    market = await MarketAggregator().get_match_market("nope")
    assert market == {"market_data": {}, "total_bets": 0}
