"""
backend/app/providers/tennis.py

Purpose:
    Tennis live match feeds: RapidAPI tennis live data and Sportradar live
    summaries, mapped to the common match shape.

Dependencies:
    - app.providers.http_client
    - app.config
"""

from typing import Any

from app.config import settings
from app.providers.base import BaseMatchFeed
from app.providers.http_client import ResilientClient


class RapidApiTennisFeed(BaseMatchFeed):
    source = "rapidapi-tennis"

    def __init__(self, client: ResilientClient):
        self._client = client

    def is_configured(self) -> bool:
        return bool(settings.RAPIDAPI_KEY)

    async def get_matches(self, limit: int) -> list[dict[str, Any]]:
        host = settings.TENNIS_RAPIDAPI_HOST
        data = await self._client.get_json(
            f"https://{host}/matches/live",
            headers={"X-RapidAPI-Key": settings.RAPIDAPI_KEY, "X-RapidAPI-Host": host},
        )
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            return []

        out = []
        for i, m in enumerate(results[:limit]):
            home = (m.get("homeCompetitor") or {}).get("name") or m.get("player1") or "Player 1"
            away = (m.get("awayCompetitor") or {}).get("name") or m.get("player2") or "Player 2"
            out.append({
                "id": m.get("id") or f"tennis_{i}",
                "display": f"{home} vs {away}",
                "status": m.get("status") or m.get("matchStatus") or "Live",
                "tournament": (m.get("tournament") or {}).get("name") or m.get("event") or "Tennis Tournament",
            })
        return out


class SportradarTennisFeed(BaseMatchFeed):
    source = "sportradar"

    def __init__(self, client: ResilientClient):
        self._client = client

    def is_configured(self) -> bool:
        return bool(settings.SPORTRADAR_TENNIS_KEY)

    async def get_matches(self, limit: int) -> list[dict[str, Any]]:
        data = await self._client.get_json(
            f"{settings.SPORTRADAR_BASE_URL}/schedules/live/summaries.json",
            params={"api_key": settings.SPORTRADAR_TENNIS_KEY},
        )
        summaries = data.get("summaries") if isinstance(data, dict) else None
        if not isinstance(summaries, list):
            return []

        out = []
        for i, s in enumerate(summaries[:limit]):
            event = s.get("sport_event") or {}
            competitors = event.get("competitors") or []
            names = [c.get("name") for c in competitors[:2]] + [None, None]
            out.append({
                "id": event.get("id") or f"tennis_alt_{i}",
                "display": f"{names[0] or 'Player 1'} vs {names[1] or 'Player 2'}",
                "status": (s.get("sport_event_status") or {}).get("status") or "Live",
                "tournament": (event.get("tournament") or {}).get("name") or "Tennis Tournament",
            })
        return out
