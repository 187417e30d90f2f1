import logging
from typing import Dict, List, Optional
from pydantic import ValidationError
from mapa.core.config import settings
from mapa.core.exceptions import InvalidRadiusError, UnknownZoneError
from mapa.core.logger import logs
from mapa.models.base_model import Coordinates, Zone, ZoneKey

ZONE_CENTERS = {
    ZoneKey.NORTE: Coordinates(lat=-23.490, lon=-46.650),
    ZoneKey.SUL: Coordinates(lat=-23.650, lon=-46.650),
    ZoneKey.LESTE: Coordinates(lat=-23.550, lon=-46.500),
    ZoneKey.OESTE: Coordinates(lat=-23.550, lon=-46.800),
}


def initial_zones(radius: float = None) -> Dict[ZoneKey, Zone]:
    """Builds the starting zone table, every zone sharing the configured radius."""
    radius = settings.ZONE_RADIUS_M if radius is None else radius
    return {
        key: Zone(key=key, center=center, radius=radius)
        for key, center in ZONE_CENTERS.items()
    }


class ZoneCatalog:
    """
    Zone table owned by one map session.
    Zones are replaced, never edited in place, so a Zone handed out earlier keeps its radius.
    """

    def __init__(self, zones: Optional[Dict[ZoneKey, Zone]] = None):
        self._zones = dict(zones) if zones is not None else initial_zones()

    def get(self, key) -> Zone:
        try:
            return self._zones[ZoneKey(key)]
        except (ValueError, KeyError):
            raise UnknownZoneError(str(getattr(key, "value", key)))

    def zones(self) -> List[Zone]:
        return list(self._zones.values())

    def grow_zone_radius(self, key, delta: float = None) -> Zone:
        """Adds ``delta`` meters (default: the configured step) to a zone's radius."""
        delta = settings.ZONE_RADIUS_STEP if delta is None else delta
        zone = self.get(key)
        try:
            grown = Zone(key=zone.key, center=zone.center, radius=zone.radius + delta)
        except ValidationError:
            raise InvalidRadiusError(
                f"Radius of zone '{zone.key.value}' must stay positive (got {zone.radius + delta})"
            )

        self._zones[zone.key] = grown
        logs.log(logging.INFO, f"Zone {zone.key.value} radius {zone.radius:.0f}m -> {grown.radius:.0f}m")
        return grown
