"""
backend/app/services/teen_patti.py

Purpose:
    Teen Patti round engine: 52-card deck, unbiased shuffle, two 3-card
    hands, hand ranking and head-to-head comparison.

    Categories, strongest first:
        6 Trail          three of a rank          key [rank]
        5 Pure Sequence  run of one suit          key [top of run]
        4 Sequence       run                      key [top of run]
        3 Color          one suit, not a run      key ranks descending
        2 Pair           two of a rank            key [pair rank, kicker]
        1 High Card                               key ranks descending

    A-2-3 is the lowest run and ranks by its 3.

Dependencies:
    - app.services.random_source
    - app.services.card_games
"""

from dataclasses import dataclass
from typing import Any, Optional

from app.services.card_games import require_selection, parse_amount
from app.services.random_source import RandomOutcomeSource, get_random_source
from app.utils import utcnow

SUITS = ("♠", "♥", "♦", "♣")
RANKS = tuple(range(2, 15))  # 11=J, 12=Q, 13=K, 14=A

TRAIL, PURE_SEQUENCE, SEQUENCE, COLOR, PAIR, HIGH_CARD = 6, 5, 4, 3, 2, 1

CATEGORY_LABELS = {
    TRAIL: "Trail",
    PURE_SEQUENCE: "Pure Sequence",
    SEQUENCE: "Sequence",
    COLOR: "Color",
    PAIR: "Pair",
    HIGH_CARD: "High Card",
}

TEEN_PATTI_SELECTIONS = ("playerA", "playerB", "tie")
TEEN_PATTI_MULTIPLIERS = {"playerA": 1, "playerB": 1, "tie": 8}

_RANK_LABELS = {11: "J", 12: "Q", 13: "K", 14: "A"}


@dataclass(frozen=True)
class Card:
    rank: int
    suit: str

    @property
    def label(self) -> str:
        return _RANK_LABELS.get(self.rank, str(self.rank))


@dataclass(frozen=True)
class HandRank:
    category: int
    key: tuple[int, ...]

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self.category]


def build_deck() -> list[Card]:
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


def is_sequence(ranks: list[int]) -> tuple[bool, int]:
    """Return (is_run, top_of_run) for three ranks."""
    low, mid, high = sorted(ranks)
    if (low, mid, high) == (2, 3, 14):
        return True, 3
    return low + 1 == mid and mid + 1 == high, high


def evaluate(hand: list[Card]) -> HandRank:
    if len(hand) != 3:
        raise ValueError("A Teen Patti hand has exactly 3 cards.")

    ranks = sorted(card.rank for card in hand)
    same_suit = len({card.suit for card in hand}) == 1
    run, top = is_sequence(ranks)
    descending = tuple(reversed(ranks))

    if ranks[0] == ranks[2]:
        return HandRank(TRAIL, (ranks[2],))
    if run and same_suit:
        return HandRank(PURE_SEQUENCE, (top,))
    if run:
        return HandRank(SEQUENCE, (top,))
    if same_suit:
        return HandRank(COLOR, descending)
    if ranks[0] == ranks[1]:
        return HandRank(PAIR, (ranks[0], ranks[2]))
    if ranks[1] == ranks[2]:
        return HandRank(PAIR, (ranks[1], ranks[0]))
    return HandRank(HIGH_CARD, descending)


def compare(a: HandRank, b: HandRank) -> int:
    """1 if a wins, -1 if b wins, 0 on a tie. Missing key slots count as 0."""
    if a.category != b.category:
        return 1 if a.category > b.category else -1
    for i in range(max(len(a.key), len(b.key))):
        av = a.key[i] if i < len(a.key) else 0
        bv = b.key[i] if i < len(b.key) else 0
        if av != bv:
            return 1 if av > bv else -1
    return 0


def compare_hands(hand_a: list[Card], hand_b: list[Card]) -> int:
    return compare(evaluate(hand_a), evaluate(hand_b))


def _hand_view(hand: list[Card], rank: HandRank) -> dict:
    return {
        "hand": [{"rank": c.rank, "label": c.label, "suit": c.suit} for c in hand],
        "info": {"rank": rank.category, "label": rank.label},
    }


def deal(selection: Any, amount: Any, source: Optional[RandomOutcomeSource] = None) -> dict:
    """Shuffle a fresh deck, deal two hands and settle the selection."""
    selection = require_selection(selection, TEEN_PATTI_SELECTIONS)
    bet_amount = parse_amount(amount)
    source = source or get_random_source()

    deck = source.shuffle(build_deck())
    player_a = [deck.pop(), deck.pop(), deck.pop()]
    player_b = [deck.pop(), deck.pop(), deck.pop()]

    rank_a = evaluate(player_a)
    rank_b = evaluate(player_b)
    cmp = compare(rank_a, rank_b)
    winner = "playerA" if cmp > 0 else "playerB" if cmp < 0 else "tie"
    multiplier = TEEN_PATTI_MULTIPLIERS[winner]
    win = selection == winner

    return {
        "game": "teenpatti",
        "selection": selection,
        "amount": bet_amount,
        "playerA": _hand_view(player_a, rank_a),
        "playerB": _hand_view(player_b, rank_b),
        "winner": winner,
        "payoutMultiplier": multiplier,
        "winAmount": bet_amount * multiplier if win else 0,
        "outcome": "win" if win else "lose",
        "timestamp": utcnow().isoformat(),
    }
