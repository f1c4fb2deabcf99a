"""
backend/app/services/card_games.py

Purpose:
    Round evaluators for the draw-based mini-games: 7-Up-Down, Roulette
    (straight-number bets) and Dragon Tiger. Each evaluator validates its
    input, draws via RandomOutcomeSource, classifies the draw and computes
    the monetary outcome. No state is kept between rounds.

Dependencies:
    - app.services.random_source
    - app.errors
"""

import logging
import math
from typing import Any, Optional

from app.errors import ValidationError
from app.services.random_source import RandomOutcomeSource, get_random_source
from app.utils import utcnow

logger = logging.getLogger("bibet.card_games")

SEVEN_UP_DOWN_SELECTIONS = ("up", "down", "seven")
DRAGON_TIGER_SELECTIONS = ("dragon", "tiger", "tie")

SEVEN_PAYOUT_MULTIPLIER = 11
STRAIGHT_PAYOUT_MULTIPLIER = 35
DRAGON_TIGER_MULTIPLIERS = {"dragon": 1, "tiger": 1, "tie": 8}

ROULETTE_MAX_NUMBER = 36
RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})

_FACE_LABELS = {1: "A", 11: "J", 12: "Q", 13: "K"}


def card_label(value: int) -> str:
    """Label for an A-low card value 1..13."""
    return _FACE_LABELS.get(value, str(value))


def _to_number(value: Any) -> Optional[float]:
    """Coerce a JSON scalar to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_amount(amount: Any) -> float:
    """Validate a wager amount: finite and strictly positive."""
    value = _to_number(amount)
    if value is None or value <= 0:
        raise ValidationError("Invalid amount")
    return value


def require_selection(selection: Any, allowed: tuple[str, ...]) -> str:
    if selection not in allowed:
        raise ValidationError(f"Invalid selection. Use one of: {', '.join(allowed)}")
    return selection


def _draw_card(source: RandomOutcomeSource) -> dict:
    value = source.randint(1, 13)
    return {"value": value, "label": card_label(value)}


# ---------- 7 Up & Down ----------

def seven_up_down_category(value: int) -> str:
    if value < 7:
        return "down"
    if value == 7:
        return "seven"
    return "up"


def play_seven_up_down(
    selection: Any, amount: Any, source: Optional[RandomOutcomeSource] = None,
) -> dict:
    """Play one 7-Up-Down round. A correct "seven" call pays 11x, up/down pay even money."""
    selection = require_selection(selection, SEVEN_UP_DOWN_SELECTIONS)
    bet_amount = parse_amount(amount)
    source = source or get_random_source()

    card = _draw_card(source)
    category = seven_up_down_category(card["value"])
    multiplier = SEVEN_PAYOUT_MULTIPLIER if category == "seven" else 1
    win = selection == category

    return {
        "game": "7updown",
        "selection": selection,
        "amount": bet_amount,
        "card": card,
        "category": category,
        "outcome": "win" if win else "lose",
        "payoutMultiplier": multiplier,
        "winAmount": bet_amount * multiplier if win else 0,
        "timestamp": utcnow().isoformat(),
    }


# ---------- Roulette ----------

def roulette_color(number: int) -> str:
    if number == 0:
        return "green"
    return "red" if number in RED_NUMBERS else "black"


def sanitize_roulette_bets(bets: Any) -> list[dict]:
    """Keep only well-formed straight bets; anything else is silently dropped."""
    if not isinstance(bets, list):
        raise ValidationError("bets must be an array")

    sanitized: list[dict] = []
    for entry in bets:
        if not isinstance(entry, dict):
            continue
        if (entry.get("type") or "straight") != "straight":
            continue
        amount = _to_number(entry.get("amount"))
        if amount is None or amount <= 0:
            continue
        number = _to_number(entry.get("number"))
        if number is None or not number.is_integer():
            continue
        number = int(number)
        if not 0 <= number <= ROULETTE_MAX_NUMBER:
            continue
        sanitized.append({"type": "straight", "number": number, "amount": amount})
    return sanitized


def spin_roulette(bets: Any, source: Optional[RandomOutcomeSource] = None) -> dict:
    """Spin once and settle every straight-number bet at 35 to 1."""
    sanitized = sanitize_roulette_bets(bets)
    total_bet = sum(b["amount"] for b in sanitized)
    if total_bet <= 0:
        raise ValidationError("No valid bets placed")
    if len(sanitized) != len(bets):
        logger.debug("Roulette dropped %d malformed bet entries", len(bets) - len(sanitized))

    source = source or get_random_source()
    number = source.randint(0, ROULETTE_MAX_NUMBER)

    outcomes = []
    for bet in sanitized:
        win = bet["number"] == number
        outcomes.append({
            **bet,
            "win": win,
            "payout": bet["amount"] * STRAIGHT_PAYOUT_MULTIPLIER if win else 0,
        })
    win_amount = sum(o["payout"] for o in outcomes)

    return {
        "game": "roulette",
        "number": number,
        "color": roulette_color(number),
        "outcomes": outcomes,
        "totalBet": total_bet,
        "winAmount": win_amount,
        "balanceChange": win_amount - total_bet,
        "timestamp": utcnow().isoformat(),
    }


# ---------- Dragon Tiger ----------

def dragon_tiger_winner(dragon: int, tiger: int) -> str:
    if dragon > tiger:
        return "dragon"
    if tiger > dragon:
        return "tiger"
    return "tie"


def deal_dragon_tiger(
    selection: Any, amount: Any, source: Optional[RandomOutcomeSource] = None,
) -> dict:
    """Deal one card each to Dragon and Tiger (ace low); tie pays 8x."""
    selection = require_selection(selection, DRAGON_TIGER_SELECTIONS)
    bet_amount = parse_amount(amount)
    source = source or get_random_source()

    dragon = _draw_card(source)
    tiger = _draw_card(source)
    winner = dragon_tiger_winner(dragon["value"], tiger["value"])
    multiplier = DRAGON_TIGER_MULTIPLIERS[winner]
    win = selection == winner

    return {
        "game": "dragon-tiger",
        "selection": selection,
        "amount": bet_amount,
        "dragon": dragon,
        "tiger": tiger,
        "winner": winner,
        "payoutMultiplier": multiplier,
        "winAmount": bet_amount * multiplier if win else 0,
        "outcome": "win" if win else "lose",
        "timestamp": utcnow().isoformat(),
    }
