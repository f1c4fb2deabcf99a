"""
backend/tests/test_api_contract.py

Purpose:
    HTTP contract tests for the betting, games, sports, auth and users
    routers: status codes, the {success, message} envelope and camelCase
    payloads, with the auth dependency overridden where needed.
"""

from __future__ import annotations

import sys

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

sys.path.insert(0, "backend")

from app.main import app
from app.services import card_games, sports_service
from app.services.auth_service import get_current_user


@pytest.fixture
def current_user(fake_db):
    user = {
        "_id": ObjectId(),
        "email": "punter@example.com",
        "full_name": "Punter One",
        "role": "user",
        "is_active": True,
        "balance": 100.0,
    }
    fake_db.users.docs.append(user)
    return user


@pytest.fixture
def client(current_user):
    async def _fake_user():
        return current_user

    app.dependency_overrides[get_current_user] = _fake_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_db):
    app.dependency_overrides.clear()
    return TestClient(app)


_BET = {"matchId": "m1", "runner": "India", "betType": "lay", "odds": 3, "stake": 10}


def test_place_bet_returns_camel_case_bet(client, fake_db, current_user):
    response = client.post("/api/betting/place", json=_BET)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Bet placed successfully"
    assert body["bet"]["betType"] == "lay"
    assert body["bet"]["liability"] == 20.0
    assert body["bet"]["potentialWin"] == 10.0
    assert body["bet"]["userId"] == str(current_user["_id"])
    assert fake_db.users.docs[0]["balance"] == 80.0


def test_place_bet_alias_route(client):
    response = client.post("/api/betting/place-bet", json={**_BET, "betType": "back", "matchId": 123})
    assert response.status_code == 201
    assert response.json()["bet"]["matchId"] == "123"


@pytest.mark.parametrize(
    ("override", "message"),
    [
        ({"stake": 0.5}, "Minimum stake is 1"),
        ({"stake": 250001}, "Maximum stake is 250,000"),
        ({"runner": ""}, "All fields are required"),
        ({"odds": 60}, "Insufficient balance"),
    ],
)
def test_place_bet_rejections(client, fake_db, override, message):
    response = client.post("/api/betting/place", json={**_BET, **override})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["message"] == message
    assert fake_db.bets.docs == []


def test_place_bet_rejects_infinite_odds_before_persisting(client, fake_db):
    body = '{"matchId": "m1", "runner": "India", "betType": "lay", "odds": Infinity, "stake": 10}'
    response = client.post(
        "/api/betting/place", content=body, headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Odds and stake must be finite numbers"
    assert fake_db.bets.docs == []
    assert fake_db.users.docs[0]["balance"] == 100.0


def test_my_bets_cancel_and_summary(client, fake_db):
    bet_id = client.post("/api/betting/place", json=_BET).json()["bet"]["id"]

    listed = client.get("/api/betting/my-bets", params={"status": "pending"}).json()
    assert [b["id"] for b in listed["bets"]] == [bet_id]

    cancel = client.put(f"/api/betting/cancel/{bet_id}")
    assert cancel.json() == {"success": True, "message": "Bet cancelled successfully"}
    assert fake_db.users.docs[0]["balance"] == 100.0

    again = client.put(f"/api/betting/cancel/{bet_id}")
    assert again.status_code == 404
    assert again.json()["message"] == "Bet not found or cannot be cancelled"

    summary = client.get("/api/betting/summary").json()
    assert summary["balance"] == 100.0
    assert summary["summary"] == [{"status": "cancelled", "count": 1, "totalStake": 10.0, "totalPayout": 0.0}]


def test_match_market_view(client):
    client.post("/api/betting/place", json={**_BET, "betType": "back", "odds": 2})

    body = client.get("/api/betting/match/m1").json()

    assert body["totalBets"] == 1
    assert body["marketData"]["India"]["back"][0]["odds"] == 2.0
    assert body["marketData"]["India"]["back"][0]["username"] == "Punter One"


def test_betting_requires_token(anonymous_client):
    response = anonymous_client.get("/api/betting/my-bets")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Access token required"}


def test_games_lobby_and_seven_up_down(anonymous_client, monkeypatch, scripted_source):
    lobby = anonymous_client.get("/api/games").json()
    assert [g["id"] for g in lobby["games"]] == [900001, 900002, 900003, 900004]

    monkeypatch.setattr(card_games, "get_random_source", lambda: scripted_source(draws=[7]))
    body = anonymous_client.post("/api/games/7updown/play", json={"selection": "seven", "amount": 10}).json()

    assert body["success"] is True
    assert body["outcome"] == "win"
    assert body["winAmount"] == 110


def test_game_input_errors_use_envelope(anonymous_client):
    bad_selection = anonymous_client.post("/api/games/dragon-tiger/deal", json={"selection": "lion", "amount": 5})
    assert bad_selection.status_code == 400
    assert bad_selection.json()["message"] == "Invalid selection. Use one of: dragon, tiger, tie"

    bad_amount = anonymous_client.post("/api/games/teenpatti/deal", json={"selection": "tie", "amount": "lots"})
    assert bad_amount.status_code == 400
    assert bad_amount.json()["message"] == "Invalid amount"

    no_bets = anonymous_client.post("/api/games/roulette/spin", json={"bets": []})
    assert no_bets.status_code == 400
    assert no_bets.json()["message"] == "No valid bets placed"


def test_sports_feed_demo_fallback(anonymous_client, monkeypatch):
    class _Feed:
        async def get_matches(self, sport):
            return {"source": "demo", "fallbackUsed": True, "data": sports_service.DEMO_MATCHES[sport]}

    monkeypatch.setattr("app.routers.sports.get_sports_feed_service", lambda: _Feed())
    body = anonymous_client.get("/api/sports/soccer").json()

    assert body["success"] is True
    assert body["fallbackUsed"] is True
    assert body["data"][0]["team_info"]["home"]["name"] == "Manchester United"


def test_register_login_and_validation(anonymous_client):
    payload = {"fullName": "Jane Doe", "email": "jane@example.com", "password": "secret"}

    created = anonymous_client.post("/api/auth/register", json=payload)
    assert created.status_code == 201
    assert created.json()["data"]["user"]["fullName"] == "Jane Doe"
    assert created.json()["data"]["token"]

    duplicate = anonymous_client.post("/api/auth/register", json=payload)
    assert duplicate.status_code == 409

    wrong = anonymous_client.post("/api/auth/login", json={"email": "jane@example.com", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid email or password"

    token = anonymous_client.post(
        "/api/auth/login", json={"email": "jane@example.com", "password": "secret"},
    ).json()["data"]["token"]
    profile = anonymous_client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert profile.json()["data"]["user"]["email"] == "jane@example.com"

    invalid = anonymous_client.post("/api/auth/register", json={**payload, "fullName": "J4ne"})
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "Validation failed"
    assert invalid.json()["errors"][0]["field"] == "fullName"


def test_users_endpoints_are_admin_only(client, current_user):
    assert client.get("/api/users").status_code == 403

    current_user["role"] = "admin"
    listed = client.get("/api/users", params={"page": 1, "limit": 5}).json()
    assert listed["data"]["pagination"]["totalUsers"] == 1

    created = client.post("/api/users", json={"username": "agent7", "password": "secret1", "type": "Master"})
    assert created.status_code == 201
    assert created.json()["data"]["user"]["username"] == "agent7"

    found = client.get("/api/users/search", params={"username": "AGENT"}).json()
    assert [u["username"] for u in found["data"]["users"]] == ["agent7"]

    assert client.get("/api/users/search").status_code == 400


def test_unknown_route_and_root(anonymous_client):
    missing = anonymous_client.get("/api/nothing-here")
    assert missing.status_code == 404
    assert missing.json()["success"] is False

    assert anonymous_client.get("/").json()["message"] == "Welcome to Bibet888 API"
