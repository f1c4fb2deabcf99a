"""
backend/tests/test_card_games.py

Purpose:
    Deterministic rounds of 7-Up-Down, Roulette and Dragon Tiger with a
    scripted random source, plus input validation.
"""

from __future__ import annotations

import sys

import pytest

sys.path.insert(0, "backend")

from app.errors import ValidationError
from app.services import card_games


def test_seven_on_seven_pays_eleven(scripted_source):
    result = card_games.play_seven_up_down("seven", 10, source=scripted_source(draws=[7]))

    assert result["card"] == {"value": 7, "label": "7"}
    assert result["category"] == "seven"
    assert result["outcome"] == "win"
    assert result["payoutMultiplier"] == 11
    assert result["winAmount"] == 110


@pytest.mark.parametrize(
    ("value", "category", "label"),
    [(1, "down", "A"), (6, "down", "6"), (8, "up", "8"), (13, "up", "K")],
)
def test_seven_up_down_categories(scripted_source, value, category, label):
    result = card_games.play_seven_up_down("up", 5, source=scripted_source(draws=[value]))

    assert result["category"] == category
    assert result["card"]["label"] == label
    assert result["winAmount"] == (5 if category == "up" else 0)


def test_seven_drawn_against_up_loses(scripted_source):
    result = card_games.play_seven_up_down("up", 10, source=scripted_source(draws=[7]))
    assert result["outcome"] == "lose"
    assert result["winAmount"] == 0


@pytest.mark.parametrize("selection", [None, "UP", "middle", 7])
def test_invalid_selection_rejected(selection):
    with pytest.raises(ValidationError, match="Invalid selection"):
        card_games.play_seven_up_down(selection, 10)


@pytest.mark.parametrize("amount", [None, 0, -5, "abc", float("inf"), True])
def test_invalid_amount_rejected(amount):
    with pytest.raises(ValidationError, match="Invalid amount"):
        card_games.play_seven_up_down("up", amount)


def test_roulette_straight_hit_and_miss(scripted_source):
    bets = [{"type": "straight", "number": 17, "amount": 10}]

    hit = card_games.spin_roulette(bets, source=scripted_source(draws=[17]))
    assert hit["number"] == 17
    assert hit["color"] == "black"
    assert hit["winAmount"] == 350
    assert hit["balanceChange"] == 340
    assert hit["outcomes"][0]["win"] is True

    miss = card_games.spin_roulette(bets, source=scripted_source(draws=[5]))
    assert miss["color"] == "red"
    assert miss["winAmount"] == 0
    assert miss["balanceChange"] == -10


def test_roulette_drops_malformed_entries(scripted_source):
    bets = [
        {"type": "straight", "number": 0, "amount": 5},
        {"type": "split", "number": 1, "amount": 5},
        {"number": 37, "amount": 5},
        {"number": 2.5, "amount": 5},
        {"number": 3, "amount": 0},
        "junk",
    ]
    result = card_games.spin_roulette(bets, source=scripted_source(draws=[0]))

    assert result["color"] == "green"
    assert result["totalBet"] == 5
    assert len(result["outcomes"]) == 1
    assert result["winAmount"] == 175


def test_roulette_requires_a_valid_bet():
    with pytest.raises(ValidationError, match="bets must be an array"):
        card_games.spin_roulette({"number": 1})
    with pytest.raises(ValidationError, match="No valid bets placed"):
        card_games.spin_roulette([{"number": 40, "amount": 1}])


@pytest.mark.parametrize(
    ("dragon", "tiger", "winner", "multiplier"),
    [(13, 2, "dragon", 1), (1, 12, "tiger", 1), (9, 9, "tie", 8)],
)
def test_dragon_tiger_winner(scripted_source, dragon, tiger, winner, multiplier):
    result = card_games.deal_dragon_tiger(winner, 10, source=scripted_source(draws=[dragon, tiger]))

    assert result["winner"] == winner
    assert result["payoutMultiplier"] == multiplier
    assert result["winAmount"] == 10 * multiplier
    assert result["outcome"] == "win"


def test_dragon_tiger_losing_selection(scripted_source):
    result = card_games.deal_dragon_tiger("tie", 10, source=scripted_source(draws=[4, 11]))
    assert result["winner"] == "tiger"
    assert result["tiger"]["label"] == "J"
    assert result["winAmount"] == 0
