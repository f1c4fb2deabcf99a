"""Mini-game request bodies.

Selections and amounts are validated by the evaluators themselves so the
same rules apply whether a round is played over HTTP or called directly.
"""

from typing import Any

from pydantic import BaseModel


class GameBetRequest(BaseModel):
    """Body for single-selection games (7-Up-Down, Teen Patti, Dragon Tiger)."""
    selection: Any = None
    amount: Any = None


class RouletteSpinRequest(BaseModel):
    """Roulette body; malformed entries are dropped by the evaluator."""
    bets: Any = []


LOBBY_GAMES = [
    {"id": 900001, "name": "7 Up & Down", "image": "/vite.svg"},
    {"id": 900002, "name": "Roulette", "image": "/vite.svg"},
    {"id": 900003, "name": "Teen Patti", "image": "https://cdn.dreamcasino.live/rg_teen_patti.webp"},
    {"id": 900004, "name": "Dragon Tiger", "image": "https://cdn.dreamcasino.live/rg_dragon_tiger.webp"},
]
