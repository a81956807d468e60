import asyncio
from typing import Dict, Optional

from micex_iss.platforms.micex.models import VenueInfo


class SecurityInfoCache:
    """
    Memo of the venue (engine/market) each security trades under.

    Entries never expire; venue assignment is stable for the lifetime of a
    process. One instance can be shared between several clients.
    """

    def __init__(self) -> None:
        self._venues: Dict[str, VenueInfo] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, security: str) -> Optional[VenueInfo]:
        return self._venues.get(security)

    def set(self, security: str, venue: VenueInfo) -> None:
        self._venues[security] = venue

    def lock(self, security: str) -> asyncio.Lock:
        """Per-security lock so concurrent first lookups hit upstream once."""
        lock = self._locks.get(security)
        if lock is None:
            lock = self._locks[security] = asyncio.Lock()
        return lock

    def clear(self) -> None:
        self._venues.clear()
        self._locks.clear()

    def __contains__(self, security: object) -> bool:
        return security in self._venues

    def __len__(self) -> int:
        return len(self._venues)
