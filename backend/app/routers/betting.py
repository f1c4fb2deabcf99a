"""Exchange-style wagering endpoints: place, list, market view, cancel, summary."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.models.bet import PlaceBetRequest, bet_to_response
from app.services.auth_service import get_current_user
from app.services.market_service import get_market_aggregator
from app.services.wager_ledger import get_wager_ledger

router = APIRouter(prefix="/api/betting", tags=["betting"])


@router.post("/place", status_code=status.HTTP_201_CREATED)
@router.post("/place-bet", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def place_bet(body: PlaceBetRequest, user=Depends(get_current_user)):
    bet = await get_wager_ledger().place_bet(
        user_id=str(user["_id"]),
        match_id=body.match_id,
        runner=body.runner,
        bet_type=body.bet_type,
        odds=body.odds,
        stake=body.stake,
        match_details=body.match_details.model_dump() if body.match_details else None,
    )
    return {
        "success": True,
        "message": "Bet placed successfully",
        "bet": bet_to_response(bet),
    }


@router.get("/my-bets")
async def my_bets(
    bet_status: Optional[str] = Query(None, alias="status"),
    match_id: Optional[str] = Query(None, alias="matchId"),
    user=Depends(get_current_user),
):
    """The caller's most recent bets, newest first."""
    bets = await get_wager_ledger().get_user_bets(
        str(user["_id"]), status=bet_status, match_id=match_id,
    )
    return {"success": True, "bets": [bet_to_response(b) for b in bets]}


@router.get("/match/{match_id}")
async def match_market(match_id: str, user=Depends(get_current_user)):
    """Open bets on a match grouped by runner and side."""
    market = await get_market_aggregator().get_match_market(match_id)
    return {
        "success": True,
        "marketData": market["market_data"],
        "totalBets": market["total_bets"],
    }


@router.put("/cancel/{bet_id}")
async def cancel_bet(bet_id: str, user=Depends(get_current_user)):
    await get_wager_ledger().cancel_bet(str(user["_id"]), bet_id)
    return {"success": True, "message": "Bet cancelled successfully"}


@router.get("/summary")
async def betting_summary(user=Depends(get_current_user)):
    result = await get_wager_ledger().get_betting_summary(str(user["_id"]))
    return {
        "success": True,
        "summary": [
            {
                "status": row["status"],
                "count": row["count"],
                "totalStake": row["total_stake"],
                "totalPayout": row["total_payout"],
            }
            for row in result["summary"]
        ],
        "balance": result["balance"],
    }
