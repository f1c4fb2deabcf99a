from abc import ABC, abstractmethod
from typing import Any


class BaseMatchFeed(ABC):
    """Abstract base class for live match list providers."""

    # Reported as ``source`` when this feed supplied the data
    source: str = ""

    @abstractmethod
    def is_configured(self) -> bool:
        """True when the credentials this feed needs are present."""
        ...

    @abstractmethod
    async def get_matches(self, limit: int) -> list[dict[str, Any]]:
        """Fetch at most ``limit`` current matches.

        Returns a list of dicts with:
        - id: str
        - display: str (e.g. "India vs Australia")
        - status: str
        - tournament: str
        An empty list means the provider had nothing to offer.
        """
        ...
