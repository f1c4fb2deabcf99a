"""
backend/app/providers/football_data.py

Purpose:
    football-data.org live matches for the soccer feed, mapped to the common
    match shape.

Dependencies:
    - app.providers.http_client
    - app.config
"""

from typing import Any

from app.config import settings
from app.providers.base import BaseMatchFeed
from app.providers.http_client import ResilientClient


def _status(match: dict) -> str:
    if match.get("status"):
        return str(match["status"])
    return "Finished" if (match.get("score") or {}).get("winner") else "Live"


class FootballDataFeed(BaseMatchFeed):
    """football-data.org v4 matches?status=LIVE."""

    source = "football-data"

    def __init__(self, client: ResilientClient):
        self._client = client

    def is_configured(self) -> bool:
        return bool(settings.FOOTBALL_DATA_API_KEY)

    async def get_matches(self, limit: int) -> list[dict[str, Any]]:
        data = await self._client.get_json(
            f"{settings.FOOTBALL_DATA_BASE_URL}/matches",
            params={"status": "LIVE"},
            headers={"X-Auth-Token": settings.FOOTBALL_DATA_API_KEY},
        )
        matches = data.get("matches") if isinstance(data, dict) else None
        if not isinstance(matches, list):
            return []

        out = []
        for i, m in enumerate(matches[:limit]):
            home = (m.get("homeTeam") or {}).get("name") or "Team 1"
            away = (m.get("awayTeam") or {}).get("name") or "Team 2"
            out.append({
                "id": str(m["id"]) if m.get("id") is not None else f"football_{i}",
                "display": f"{home} vs {away}",
                "status": _status(m),
                "tournament": (m.get("competition") or {}).get("name") or "Football League",
            })
        return out
