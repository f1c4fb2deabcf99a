"""
backend/app/services/sports_service.py

Purpose:
    Live match lists per sport. Configured providers are tried in order; the
    first non-empty answer wins, capped and normalized to
    {id, display, status, tournament}. When every provider is unconfigured,
    failing or empty, a fixed demo dataset is served instead.

Dependencies:
    - app.providers.*
    - app.config
"""

import logging
from typing import Any, Optional

from app.config import settings
from app.errors import NotFoundError
from app.providers.base import BaseMatchFeed
from app.providers.cricket import CricApiFeed, RapidApiCricketFeed
from app.providers.football_data import FootballDataFeed
from app.providers.http_client import ResilientClient
from app.providers.tennis import RapidApiTennisFeed, SportradarTennisFeed

logger = logging.getLogger("bibet.sports")

DEMO_MATCHES: dict[str, list[dict[str, Any]]] = {
    "cricket": [
        {"id": "demo_c_1", "display": "🔴 DEMO: India vs Australia", "status": "Live", "tournament": "Border-Gavaskar Trophy"},
        {"id": "demo_c_2", "display": "🔴 DEMO: England vs Pakistan", "status": "Upcoming", "tournament": "Test Series"},
        {"id": "demo_c_3", "display": "🔴 DEMO: Mumbai Indians vs CSK", "status": "Live", "tournament": "IPL"},
    ],
    "tennis": [
        {"id": "demo_t_1", "display": "🔴 DEMO: Novak Djokovic vs Rafael Nadal", "status": "Live", "tournament": "ATP Masters 1000"},
        {"id": "demo_t_2", "display": "🔴 DEMO: Iga Swiatek vs Aryna Sabalenka", "status": "Upcoming", "tournament": "WTA Finals"},
        {"id": "demo_t_3", "display": "🔴 DEMO: Carlos Alcaraz vs Daniil Medvedev", "status": "Live", "tournament": "Wimbledon"},
    ],
    "soccer": [
        {
            "id": "demo_s_1",
            "name": "Manchester United vs Liverpool",
            "display": "🔴 DEMO: Manchester United vs Liverpool",
            "status": "Live",
            "tournament": "Premier League",
            "info": {"league": "Premier League", "period": "2nd Half"},
            "team_info": {"home": {"name": "Manchester United"}, "away": {"name": "Liverpool"}},
        },
        {
            "id": "demo_s_2",
            "name": "Barcelona vs Real Madrid",
            "display": "🔴 DEMO: Barcelona vs Real Madrid",
            "status": "Upcoming",
            "tournament": "La Liga",
            "info": {"league": "La Liga", "status": "Upcoming"},
            "team_info": {"home": {"name": "Barcelona"}, "away": {"name": "Real Madrid"}},
        },
        {
            "id": "demo_s_3",
            "name": "Bayern Munich vs Dortmund",
            "display": "🔴 DEMO: Bayern Munich vs Dortmund",
            "status": "Live",
            "tournament": "Bundesliga",
            "info": {"league": "Bundesliga", "period": "1st Half"},
            "team_info": {"home": {"name": "Bayern Munich"}, "away": {"name": "Dortmund"}},
        },
    ],
}

SPORTS = tuple(DEMO_MATCHES)


def normalize(matches: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Coerce provider rows to {id, display, status, tournament}."""
    out = []
    for i, m in enumerate(matches):
        teams = m.get("teams") or []
        team1 = m.get("team1") or (teams[0] if len(teams) > 0 else None) or "Team 1"
        team2 = m.get("team2") or (teams[1] if len(teams) > 1 else None) or "Team 2"
        out.append({
            "id": str(m.get("id") or f"m_{i}"),
            "display": m.get("display") or f"{team1} vs {team2}",
            "status": m.get("status") or "Live",
            "tournament": m.get("tournament") or "Match",
        })
    return out


class SportsFeedService:
    """Ordered provider fallthrough with a demo fallback."""

    def __init__(
        self,
        client: Optional[ResilientClient] = None,
        feeds: Optional[dict[str, list[BaseMatchFeed]]] = None,
    ):
        self._client = client or ResilientClient(
            "sports_feed",
            timeout=settings.FEED_TIMEOUT_SECONDS,
            max_retries=settings.FEED_MAX_RETRIES,
            base_delay=settings.FEED_RETRY_BASE_DELAY,
        )
        if feeds is None:
            feeds = {
                "cricket": [CricApiFeed(self._client), RapidApiCricketFeed(self._client)],
                "tennis": [RapidApiTennisFeed(self._client), SportradarTennisFeed(self._client)],
                "soccer": [FootballDataFeed(self._client)],
            }
        self._feeds = feeds

    async def get_matches(self, sport: str) -> dict[str, Any]:
        if sport not in DEMO_MATCHES:
            raise NotFoundError(f"Unknown sport: {sport}")

        limit = settings.FEED_MAX_ITEMS
        for feed in self._feeds.get(sport, []):
            if not feed.is_configured():
                continue
            try:
                matches = await feed.get_matches(limit)
            except Exception as e:
                logger.warning("%s feed failed for %s: %s", feed.source, sport, e)
                continue
            if matches:
                return {
                    "source": feed.source,
                    "fallbackUsed": False,
                    "data": normalize(matches[:limit]),
                }
            logger.info("%s feed returned no %s matches", feed.source, sport)

        return {
            "source": "demo",
            "fallbackUsed": True,
            "data": [dict(m) for m in DEMO_MATCHES[sport]],
        }

    async def aclose(self) -> None:
        await self._client.aclose()


_sports_singleton: Optional[SportsFeedService] = None


def get_sports_feed_service() -> SportsFeedService:
    global _sports_singleton
    if _sports_singleton is None:
        _sports_singleton = SportsFeedService()
    return _sports_singleton


async def close_sports_feed_service() -> None:
    global _sports_singleton
    if _sports_singleton is not None:
        await _sports_singleton.aclose()
        _sports_singleton = None
