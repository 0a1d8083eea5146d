"""
Profile Cache

Several screens need the current farmer's profile. Instead of a global
that each of them reaches into, flows receive a ProfileCache and ask it.

DESIGN DECISION: Read-through. The first get() after a session starts
fetches from the server; later calls reuse that copy until the profile
is saved again (set()) or the session ends (invalidate()).
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Optional

from vadi_hisaab.models.profile import FarmerProfile


class ProfileCache:
    """Process-wide holder of the signed-in farmer's profile."""

    def __init__(self, loader: Callable[[], Awaitable[FarmerProfile]]):
        self._loader = loader
        self._profile: Optional[FarmerProfile] = None
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> Optional[FarmerProfile]:
        """The cached profile, without fetching."""
        return self._profile

    async def get(self) -> FarmerProfile:
        """The profile, fetched once per session."""
        if self._profile is not None:
            return self._profile
        async with self._lock:
            if self._profile is None:
                self._profile = await self._loader()
        return self._profile

    def set(self, profile: FarmerProfile) -> None:
        self._profile = profile

    def invalidate(self) -> None:
        self._profile = None
