"""
backend/app/services/market_service.py

Purpose:
    Back/lay market view for a match, built from its open bets. Bets are
    grouped by runner and side with the bettor's display name attached.
    Display only: nothing is matched or priced here.

Dependencies:
    - app.services.bet_repository
    - app.services.user_repository
"""

from typing import Optional

from app.models.bet import BetType
from app.services.bet_repository import BetRepository
from app.services.user_repository import UserRepository


class MarketAggregator:
    """Groups open bets by runner and side. Display only; nothing is matched."""

    def __init__(
        self,
        bets: Optional[BetRepository] = None,
        users: Optional[UserRepository] = None,
    ):
        self.bets = bets or BetRepository()
        self.users = users or UserRepository()

    async def get_match_market(self, match_id: str) -> dict:
        bets = await self.bets.find_open_for_match(match_id)
        bettors = await self.users.get_many(b["user_id"] for b in bets)

        market: dict[str, dict[str, list[dict]]] = {}
        for bet in bets:
            sides = market.setdefault(bet["runner"], {BetType.back.value: [], BetType.lay.value: []})
            bettor = bettors.get(bet["user_id"], {})
            sides[bet["bet_type"]].append({
                "odds": bet["odds"],
                "amount": bet.get("unmatched_amount", bet["stake"]),
                "user_id": bet["user_id"],
                "username": bettor.get("username") or bettor.get("full_name"),
            })

        return {"market_data": market, "total_bets": len(bets)}


_aggregator_singleton: Optional[MarketAggregator] = None


def get_market_aggregator() -> MarketAggregator:
    global _aggregator_singleton
    if _aggregator_singleton is None:
        _aggregator_singleton = MarketAggregator()
    return _aggregator_singleton
