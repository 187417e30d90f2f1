"""
Filter/search state machine for one map session.

The transition functions are pure: they take the current FilterState plus an input
and return the next FilterState together with the effect the coordinator must run.
FilterCoordinator runs those effects against the geocoder and the POI service and
decides how each result lands on the marker set:

- zone/event dropdowns REPLACE the markers (they describe a query),
- address search APPENDS one marker (it grows a personal point set).
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union
from pydantic import ValidationError
from mapa.core.config import settings
from mapa.core.exceptions import AddressNotFoundError, UnknownEventCategoryError, UnknownZoneError
from mapa.core.logger import logs
from mapa.models.base_model import (
    ALL, Coordinates, FilterState, MapViewState, Marker, SessionSnapshot, ZoneKey
)
from mapa.services.zone_catalog import ZoneCatalog

FILTER_DIMENSION = "filter"
SEARCH_DIMENSION = "search"


# --- Effects ---
@dataclass(frozen=True)
class FetchPoints:
    category: str
    zone: ZoneKey

@dataclass(frozen=True)
class ClearMarkers:
    pass

@dataclass(frozen=True)
class GeocodeAddress:
    address: str

FilterEffect = Union[FetchPoints, ClearMarkers]


# --- Pure transitions ---
def _with(state: FilterState, **changes) -> FilterState:
    # model_copy(update=...) skips validation; rebuild so bad filter values are rejected
    return FilterState.model_validate({**state.model_dump(), **changes})


def on_location_filter_change(
    state: FilterState, value, default_category: str = None
) -> Tuple[FilterState, FilterEffect]:
    """
    Zone dropdown changed.
    A concrete zone always triggers a query; without an active event filter the
    query falls back to the default category ("amenity").
    """
    default_category = default_category or settings.DEFAULT_POI_CATEGORY
    new_state = _with(state, location_filter=value)

    if new_state.location_filter == ALL:
        return new_state, ClearMarkers()

    effective_event = state.event_filter.value if state.event_filter != ALL else ""
    return new_state, FetchPoints(
        category=effective_event or default_category,
        zone=new_state.location_filter,
    )


def on_event_filter_change(state: FilterState, value) -> Tuple[FilterState, FilterEffect]:
    """Event dropdown changed. Only queries when a zone is already selected."""
    new_state = _with(state, event_filter=value)
    effective_zone = state.location_filter if state.location_filter != ALL else None

    if new_state.event_filter != ALL and effective_zone is not None:
        return new_state, FetchPoints(category=new_state.event_filter.value, zone=effective_zone)
    return new_state, ClearMarkers()


def on_search_input(state: FilterState, text: str) -> FilterState:
    return _with(state, search_address=text)


def on_search_submit(state: FilterState) -> Optional[GeocodeAddress]:
    address = state.search_address.strip()
    if not address:
        return None
    return GeocodeAddress(address=address)


def apply_search_hit(
    state: FilterState,
    view: MapViewState,
    markers: List[Marker],
    address: str,
    coordinates: Coordinates,
    zoom: int = None,
) -> Tuple[FilterState, MapViewState, List[Marker]]:
    """Appends the found address, recenters on it and clears the search box."""
    zoom = settings.SEARCH_ZOOM if zoom is None else zoom
    return (
        _with(state, search_address=""),
        MapViewState(center=coordinates, zoom=zoom),
        append_search_marker(markers, address, coordinates),
    )


def append_search_marker(markers: List[Marker], address: str, coordinates: Coordinates) -> List[Marker]:
    return [*markers, Marker(coordinates=coordinates, label=address)]


class FilterCoordinator:
    """
    Owns one session's FilterState, map view, marker set and zone table.

    Every fetch is tagged with a sequence number per dimension ("filter" for the
    dropdowns and the seed load, "search" for address search). A result is applied
    only if no newer request was issued on its dimension meanwhile.
    """

    def __init__(
        self,
        geocoder,
        places,
        zones: ZoneCatalog,
        view: MapViewState = None,
        default_category: str = None,
        search_zoom: int = None,
    ):
        self.geocoder = geocoder
        self.places = places
        self.zones = zones
        self.default_category = default_category or settings.DEFAULT_POI_CATEGORY
        self.search_zoom = settings.SEARCH_ZOOM if search_zoom is None else search_zoom

        self.state = FilterState()
        self.view = view or MapViewState(
            center=Coordinates(lat=settings.MAP_CENTER_LAT, lon=settings.MAP_CENTER_LON),
            zoom=settings.MAP_ZOOM,
        )
        self.markers: List[Marker] = []
        self._issued = {FILTER_DIMENSION: 0, SEARCH_DIMENSION: 0}

    def _issue(self, dimension: str) -> int:
        self._issued[dimension] += 1
        return self._issued[dimension]

    def _is_current(self, dimension: str, sequence: int) -> bool:
        return self._issued[dimension] == sequence

    async def change_location_filter(self, value) -> bool:
        try:
            self.state, effect = on_location_filter_change(self.state, value, self.default_category)
        except ValidationError:
            raise UnknownZoneError(str(value))
        logs.log(logging.INFO, f"Location filter -> {value}", extra={"effect": effect})
        return await self._run_filter_effect(effect)

    async def change_event_filter(self, value) -> bool:
        try:
            self.state, effect = on_event_filter_change(self.state, value)
        except ValidationError:
            raise UnknownEventCategoryError(str(value))
        logs.log(logging.INFO, f"Event filter -> {value}", extra={"effect": effect})
        return await self._run_filter_effect(effect)

    async def _run_filter_effect(self, effect: FilterEffect) -> bool:
        """Returns False when the result was dropped as stale."""
        sequence = self._issue(FILTER_DIMENSION)

        if isinstance(effect, ClearMarkers):
            self.markers = []
            return True

        # Upstream errors propagate: filters stay updated, markers stay as they were
        points = await self.places.fetch(effect.category, effect.zone)

        if not self._is_current(FILTER_DIMENSION, sequence):
            logs.log(logging.WARNING, f"Dropping stale POI result #{sequence} ({effect.category}/{effect.zone.value})")
            return False

        self.markers = list(points)
        return True

    def set_search_address(self, text: str):
        self.state = on_search_input(self.state, text)

    async def submit_search(self, address: str = None) -> bool:
        """
        Geocodes the search box and appends the hit.
        Raises AddressNotFoundError on a miss; the search box keeps its text for correction.
        Every hit is appended, but only the latest search recenters the map and clears the box.
        Returns False only when there was nothing to search for.
        """
        if address is not None:
            self.set_search_address(address)

        effect = on_search_submit(self.state)
        if effect is None:
            logs.log(logging.INFO, "Ignoring empty search")
            return False

        sequence = self._issue(SEARCH_DIMENSION)
        coordinates = await self.geocoder.resolve(effect.address)

        if coordinates is None:
            raise AddressNotFoundError(effect.address)

        if not self._is_current(SEARCH_DIMENSION, sequence):
            # A newer search owns the view and the search box
            self.markers = append_search_marker(self.markers, effect.address, coordinates)
            logs.log(logging.INFO, f"Late search hit #{sequence} for '{effect.address}' appended without recentering")
            return True

        self.state, self.view, self.markers = apply_search_hit(
            self.state, self.view, self.markers, effect.address, coordinates, self.search_zoom
        )
        logs.log(logging.INFO, f"Search hit for '{effect.address}' at {coordinates.lat}, {coordinates.lon}")
        return True

    async def load_seed_markers(self, addresses: Iterable[str]) -> bool:
        """Geocodes a fixed address list one by one and shows every address that resolved."""
        sequence = self._issue(FILTER_DIMENSION)
        seeded = []

        for address in addresses:
            coordinates = await self.geocoder.resolve(address)
            if not self._is_current(FILTER_DIMENSION, sequence):
                logs.log(logging.WARNING, "Seed markers superseded by a filter change")
                return False
            if coordinates is not None:
                seeded.append(Marker(coordinates=coordinates, label=address))

        self.markers = seeded
        logs.log(logging.INFO, f"Loaded {len(seeded)} seed markers")
        return True

    def grow_zone_radius(self, key, delta: float = None):
        # Takes effect on the next fetch; the markers on screen are not refreshed
        return self.zones.grow_zone_radius(key, delta)

    def snapshot(self, session_id: str) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=session_id,
            filters=self.state,
            view=self.view,
            markers=list(self.markers),
            zones=self.zones.zones(),
        )
