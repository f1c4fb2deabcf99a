"""
backend/app/models/bet.py

Purpose:
    Wager documents, request bodies and camelCase API views for the
    back/lay betting ledger.

Dependencies:
    - pydantic
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BetType(str, Enum):
    back = "back"
    lay = "lay"


class BetStatus(str, Enum):
    pending = "pending"
    matched = "matched"
    cancelled = "cancelled"
    settled = "settled"
    void = "void"


class BetResult(str, Enum):
    won = "won"
    lost = "lost"
    void = "void"


# Statuses that still count towards a match market view
OPEN_STATUSES = (BetStatus.pending.value, BetStatus.matched.value)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MatchDetails(_CamelModel):
    """Display snapshot of the match at placement time."""
    home_team: Optional[str] = None
    away_team: Optional[str] = None
    tournament: Optional[str] = None
    match_date: Optional[datetime] = None


class BetInDB(BaseModel):
    """Full bet document as stored in MongoDB."""
    model_config = ConfigDict(use_enum_values=True)

    user_id: str
    match_id: str
    runner: str
    bet_type: BetType
    odds: float
    stake: float
    potential_win: float
    liability: float = 0.0
    status: BetStatus = BetStatus.pending
    matched_amount: float = 0.0
    unmatched_amount: float
    result: Optional[BetResult] = None
    payout: float = 0.0
    placed_at: datetime
    settled_at: Optional[datetime] = None
    match_details: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class PlaceBetRequest(_CamelModel):
    """Request body for placing a bet.

    Fields are optional here so that missing values reach the ledger, which
    owns the "all fields are required" rule.
    """
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True,
    )

    match_id: Optional[str] = None
    runner: Optional[str] = None
    bet_type: Optional[str] = None
    odds: Optional[float] = None
    stake: Optional[float] = None
    match_details: Optional[MatchDetails] = None


class BetResponse(_CamelModel):
    """Bet data returned to the client."""
    id: str
    user_id: str
    match_id: str
    runner: str
    bet_type: BetType
    odds: float
    stake: float
    potential_win: float
    liability: float
    status: BetStatus
    matched_amount: float
    unmatched_amount: float
    result: Optional[BetResult] = None
    payout: float
    placed_at: datetime
    settled_at: Optional[datetime] = None
    match_details: Optional[MatchDetails] = None


def bet_to_response(bet: dict) -> dict:
    """Serialize a bet document into its camelCase API shape."""
    return BetResponse(
        id=str(bet["_id"]),
        user_id=bet["user_id"],
        match_id=bet["match_id"],
        runner=bet["runner"],
        bet_type=bet["bet_type"],
        odds=bet["odds"],
        stake=bet["stake"],
        potential_win=bet["potential_win"],
        liability=bet.get("liability", 0.0),
        status=bet["status"],
        matched_amount=bet.get("matched_amount", 0.0),
        unmatched_amount=bet.get("unmatched_amount", bet["stake"]),
        result=bet.get("result"),
        payout=bet.get("payout", 0.0),
        placed_at=bet["placed_at"],
        settled_at=bet.get("settled_at"),
        match_details=bet.get("match_details"),
    ).model_dump(mode="json", by_alias=True)
