from fastapi import APIRouter

from app.services.sports_service import get_sports_feed_service

router = APIRouter(prefix="/api/sports", tags=["sports"])


@router.get("/{sport}")
async def live_matches(sport: str):
    """Current matches for a sport; demo data when no provider answers."""
    result = await get_sports_feed_service().get_matches(sport)
    return {"success": True, **result}
