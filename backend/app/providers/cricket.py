"""
backend/app/providers/cricket.py

Purpose:
    Cricket live match feeds: CricAPI current matches and a configurable
    RapidAPI cricket host. Both map their payloads to the common match shape.

Dependencies:
    - app.providers.http_client
    - app.config
"""

from typing import Any

from app.config import settings
from app.providers.base import BaseMatchFeed
from app.providers.http_client import ResilientClient


def _team(teams: Any, index: int, default: str) -> str:
    if isinstance(teams, list) and len(teams) > index and teams[index]:
        return str(teams[index])
    return default


class CricApiFeed(BaseMatchFeed):
    """api.cricapi.com currentMatches."""

    source = "cricapi"

    def __init__(self, client: ResilientClient):
        self._client = client

    def is_configured(self) -> bool:
        return bool(settings.CRICAPI_KEY)

    async def get_matches(self, limit: int) -> list[dict[str, Any]]:
        data = await self._client.get_json(
            f"{settings.CRICAPI_BASE_URL}/currentMatches",
            params={"apikey": settings.CRICAPI_KEY, "offset": 0},
        )
        matches = data.get("data") if isinstance(data, dict) else None
        if not isinstance(matches, list):
            return []

        return [
            {
                "id": m.get("id") or f"cric_{i}",
                "display": f"{_team(m.get('teams'), 0, 'Team 1')} vs {_team(m.get('teams'), 1, 'Team 2')}",
                "status": m.get("status") or m.get("matchType") or "Live",
                "tournament": m.get("series") or m.get("venue") or "Cricket Match",
            }
            for i, m in enumerate(matches[:limit])
        ]


class RapidApiCricketFeed(BaseMatchFeed):
    """Cricket matches from the RapidAPI host named in CRICKET_RAPIDAPI_HOST."""

    source = "rapidapi-cricket"

    def __init__(self, client: ResilientClient):
        self._client = client

    def is_configured(self) -> bool:
        return bool(settings.RAPIDAPI_KEY and settings.CRICKET_RAPIDAPI_HOST)

    async def get_matches(self, limit: int) -> list[dict[str, Any]]:
        host = settings.CRICKET_RAPIDAPI_HOST
        data = await self._client.get_json(
            f"https://{host}/matches",
            headers={"X-RapidAPI-Key": settings.RAPIDAPI_KEY, "X-RapidAPI-Host": host},
        )
        if isinstance(data, list):
            matches = data
        elif isinstance(data, dict):
            matches = data.get("matches") or data.get("data") or []
        else:
            matches = []
        if not isinstance(matches, list):
            return []

        out = []
        for i, m in enumerate(matches[:limit]):
            team1 = (m.get("team1") or {}).get("name") or _team(m.get("teams"), 0, "Team 1")
            team2 = (m.get("team2") or {}).get("name") or _team(m.get("teams"), 1, "Team 2")
            out.append({
                "id": m.get("id") or f"rapid_{i}",
                "display": f"{team1} vs {team2}",
                "status": m.get("status") or "Live",
                "tournament": (m.get("tournament") or {}).get("name") or m.get("series") or "Cricket Match",
            })
        return out
