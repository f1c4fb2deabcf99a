"""Mini-game endpoints. Each round is settled on the spot and not persisted."""

from fastapi import APIRouter

from app.models.games import LOBBY_GAMES, GameBetRequest, RouletteSpinRequest
from app.services import card_games, teen_patti

router = APIRouter(prefix="/api/games", tags=["games"])


@router.get("")
async def list_games():
    """Lobby listing."""
    return {"success": True, "games": LOBBY_GAMES}


@router.post("/7updown/play")
async def play_seven_up_down(body: GameBetRequest):
    result = card_games.play_seven_up_down(body.selection, body.amount)
    return {"success": True, **result}


@router.post("/roulette/spin")
async def spin_roulette(body: RouletteSpinRequest):
    result = card_games.spin_roulette(body.bets)
    return {"success": True, **result}


@router.post("/teenpatti/deal")
async def deal_teen_patti(body: GameBetRequest):
    result = teen_patti.deal(body.selection, body.amount)
    return {"success": True, **result}


@router.post("/dragon-tiger/deal")
async def deal_dragon_tiger(body: GameBetRequest):
    result = card_games.deal_dragon_tiger(body.selection, body.amount)
    return {"success": True, **result}
