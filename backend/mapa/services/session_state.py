"""
Session State Manager
Keeps one FilterCoordinator per map session in process memory.
Nothing is persisted: a restart starts every user from scratch.
"""

import asyncio
import logging
import uuid
from typing import Callable, Dict, Optional
from mapa.core.config import settings
from mapa.core.exceptions import SessionNotFoundError
from mapa.core.logger import logs
from mapa.services.filter_coordinator import FilterCoordinator
from mapa.services.Geocoding_service import GeocodingService
from mapa.services.Places_service import PlacesService
from mapa.services.zone_catalog import ZoneCatalog


def build_coordinator() -> FilterCoordinator:
    """Wires a coordinator with its own zone table and live HTTP services."""
    zones = ZoneCatalog()
    return FilterCoordinator(
        geocoder=GeocodingService(),
        places=PlacesService(zones),
        zones=zones,
    )


class SessionStateManager:
    """
    Manages map sessions by id.
    Each session gets a fresh coordinator, so zone radii grown in one session do not leak into another.
    Seed markers load in the background: the session id is handed out before any geocoding finishes.
    """

    def __init__(
        self,
        coordinator_factory: Callable[[], FilterCoordinator] = build_coordinator,
        seed_addresses: Optional[list] = None,
    ):
        self.coordinator_factory = coordinator_factory
        self.seed_addresses = seed_addresses
        self._sessions: Dict[str, FilterCoordinator] = {}
        self._seeding: Dict[str, asyncio.Task] = {}

    async def create_session(self) -> str:
        session_id = str(uuid.uuid4())
        coordinator = self.coordinator_factory()
        self._sessions[session_id] = coordinator
        logs.log(logging.INFO, f"Created map session {session_id}")

        addresses = self.seed_addresses
        if addresses is None and settings.LOAD_SEED_MARKERS:
            addresses = settings.SEED_ADDRESSES
        if addresses:
            task = asyncio.create_task(coordinator.load_seed_markers(list(addresses)))
            self._seeding[session_id] = task
            task.add_done_callback(lambda t: self._seeding_done(session_id, t))

        return session_id

    def _seeding_done(self, session_id: str, task: asyncio.Task):
        if self._seeding.get(session_id) is task:
            del self._seeding[session_id]
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logs.log(logging.ERROR, f"Seed markers failed for session {session_id}: {str(error)}")

    async def wait_for_seeding(self, session_id: str):
        """Waits until the session's seed markers are loaded (returns at once if none are pending)."""
        task = self._seeding.get(session_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def is_seeding(self, session_id: str) -> bool:
        return session_id in self._seeding

    def get(self, session_id: str) -> FilterCoordinator:
        coordinator = self._sessions.get(session_id)
        if coordinator is None:
            raise SessionNotFoundError(session_id)
        return coordinator

    def clear_state(self, session_id: str):
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        task = self._seeding.pop(session_id, None)
        if task is not None:
            task.cancel()
        logs.log(logging.INFO, f"Cleared map session {session_id}")

    def __len__(self) -> int:
        return len(self._sessions)


# Singleton instance
session_manager = SessionStateManager()
