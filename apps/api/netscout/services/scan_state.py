"""
scan_state.py — Scan lifecycle, ranking and selection (the view-model).

ScanController owns every piece of scan state and exposes four commands
(start_scan, set_sort_key, select_hotspot, retrieve_password) plus one
read-only snapshot(). Fields are only ever replaced whole, never patched.

Status transitions:
  idle ──start_scan──▶ scanning ──▶ populated | empty | errored
  any  ──start_scan──▶ scanning   (list, selection, error, retrieval cleared)

Superseded work: every scan and every retrieval takes a token. An older
scan finishing after a newer one started, or a retrieval finishing after the
selection changed / a newer retrieval / a rescan, is dropped on arrival.
Nothing is cancelled; only its effect on state is discarded.
"""

import logging
from typing import Optional

from netscout.core.errors import HotspotNotFound, LocationDenied, LocationUnavailable, NoSelection
from netscout.models.hotspot import (
    Coordinates,
    Hotspot,
    RetrievalOutcome,
    ScanSnapshot,
    ScanStatus,
    SortKey,
)
from netscout.services.geolocation import LocationProvider
from netscout.services.hotspot_resolver import HotspotResolver, ResolutionOutcome, hotspot_resolver
from netscout.services.password_retrieval import PasswordRetriever, password_retriever

logger = logging.getLogger(__name__)

LOCATION_UNSUPPORTED_MESSAGE = "Geolocation is not supported by your browser."
LOCATION_DENIED_MESSAGE = "Location access denied. Please enable location to find nearby Wi-Fi."
RESOLUTION_FAILED_MESSAGE = "Failed to fetch nearby hotspots. Please try again."
RETRIEVAL_FAILED_MESSAGE = "Failed to retrieve password. Please try again."


def sort_hotspots(hotspots: list[Hotspot], key: SortKey) -> list[Hotspot]:
    """
    Return a new list ordered by *key*; the input is left untouched.

    name ascending, distanceValue ascending, signalStrength descending.
    Missing numbers count as 0. Ties keep their incoming order.
    """
    if key == SortKey.NAME:
        return sorted(hotspots, key=lambda h: h.name)
    if key == SortKey.DISTANCE:
        return sorted(hotspots, key=lambda h: h.distance_value or 0)
    if key == SortKey.SIGNAL:
        return sorted(hotspots, key=lambda h: -(h.signal_strength or 0))
    raise ValueError(f"Unsupported sort key: {key!r}")


class ScanController:
    def __init__(
        self,
        resolver: Optional[HotspotResolver] = None,
        retriever: Optional[PasswordRetriever] = None,
    ) -> None:
        self.resolver = resolver or hotspot_resolver
        self.retriever = retriever or password_retriever

        self.status = ScanStatus.IDLE
        self.hotspots: list[Hotspot] = []
        self.selected_id: Optional[str] = None
        self.error: Optional[str] = None
        self.location: Optional[Coordinates] = None
        self.sort_key = SortKey.SIGNAL
        self.retrieval: Optional[RetrievalOutcome] = None
        self.is_retrieving = False

        self._scan_token = 0
        self._retrieval_token = 0

    # ── Queries ───────────────────────────────────────────────────────────────

    @property
    def selected(self) -> Optional[Hotspot]:
        return self._find(self.selected_id) if self.selected_id else None

    def sorted_hotspots(self) -> list[Hotspot]:
        return sort_hotspots(self.hotspots, self.sort_key)

    def snapshot(self) -> ScanSnapshot:
        return ScanSnapshot(
            status=self.status,
            hotspots=self.sorted_hotspots(),
            sort_key=self.sort_key,
            selected_id=self.selected_id,
            error=self.error,
            location=self.location,
            is_retrieving=self.is_retrieving,
            retrieval=self.retrieval,
        )

    def _find(self, hotspot_id: str) -> Optional[Hotspot]:
        return next((h for h in self.hotspots if h.id == hotspot_id), None)

    # ── Commands ──────────────────────────────────────────────────────────────

    async def start_scan(self, provider: LocationProvider) -> ScanSnapshot:
        """Locate, resolve, and replace the hotspot list."""
        self._scan_token += 1
        token = self._scan_token
        self._drop_retrieval()

        self.status = ScanStatus.SCANNING
        self.hotspots = []
        self.selected_id = None
        self.error = None
        self.retrieval = None

        try:
            location = await provider.locate()
        except LocationUnavailable as exc:
            self._finish_with_error(token, LOCATION_UNSUPPORTED_MESSAGE, exc)
            return self.snapshot()
        except LocationDenied as exc:
            self._finish_with_error(token, LOCATION_DENIED_MESSAGE, exc)
            return self.snapshot()

        if token != self._scan_token:
            return self.snapshot()
        self.location = location

        resolution = await self.resolver.resolve_with_outcome(location.latitude, location.longitude)
        if token != self._scan_token:
            logger.debug("Discarding results of superseded scan #%d", token)
            return self.snapshot()

        if resolution.outcome == ResolutionOutcome.FAILED:
            self.error = RESOLUTION_FAILED_MESSAGE
            self.status = ScanStatus.ERRORED
        elif not resolution.hotspots:
            self.status = ScanStatus.EMPTY
        else:
            self.hotspots = resolution.hotspots
            self.status = ScanStatus.POPULATED

        logger.info("Scan #%d finished: %s (%d hotspots)", token, self.status.value, len(self.hotspots))
        return self.snapshot()

    def set_sort_key(self, key: SortKey) -> ScanSnapshot:
        self.sort_key = SortKey(key)
        return self.snapshot()

    def select_hotspot(self, hotspot_id: str) -> ScanSnapshot:
        """Toggle the selection; any change clears the retrieval outcome."""
        if hotspot_id == self.selected_id:
            self.selected_id = None
        else:
            if self._find(hotspot_id) is None:
                raise HotspotNotFound(hotspot_id)
            self.selected_id = hotspot_id

        self._drop_retrieval()
        self.retrieval = None
        return self.snapshot()

    async def retrieve_password(self, hotspot_id: Optional[str] = None) -> ScanSnapshot:
        """
        Run the community-password lookup for the selected hotspot.

        Raises:
            NoSelection: nothing is selected, or *hotspot_id* isn't the selection.
        """
        hotspot = self.selected
        if hotspot is None:
            raise NoSelection("Select a hotspot before retrieving its password")
        if hotspot_id is not None and hotspot_id != hotspot.id:
            raise NoSelection(f"Hotspot {hotspot_id!r} is not the selected hotspot")

        self._retrieval_token += 1
        token = self._retrieval_token
        self.is_retrieving = True
        self.retrieval = None

        try:
            outcome = await self.retriever.retrieve(hotspot)
        except Exception as exc:
            logger.error("Password retrieval failed for %s: %s", hotspot.id, exc)
            outcome = RetrievalOutcome(message=RETRIEVAL_FAILED_MESSAGE)

        if token != self._retrieval_token:
            logger.debug("Discarding stale retrieval for %s", hotspot.id)
            return self.snapshot()

        self.retrieval = outcome
        self.is_retrieving = False
        return self.snapshot()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _drop_retrieval(self) -> None:
        """Invalidate any in-flight retrieval."""
        self._retrieval_token += 1
        self.is_retrieving = False

    def _finish_with_error(self, token: int, message: str, exc: Exception) -> None:
        if token != self._scan_token:
            return
        logger.info("Scan #%d aborted: %s", token, exc)
        self.error = message
        self.status = ScanStatus.ERRORED


# Module-level singleton — the one controller that owns scan state
scan_controller = ScanController()


def get_scan_controller() -> ScanController:
    """
    FastAPI dependency — inject the scan controller into route handlers.

    Tests swap in a fresh controller via app.dependency_overrides.
    """
    return scan_controller
