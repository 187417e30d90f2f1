import httpx
import logging
from typing import Optional
from mapa.core.config import settings
from mapa.core.exceptions import UpstreamServiceError
from mapa.core.logger import logs
from mapa.models.base_model import ALL, Coordinates, Marker, Zone
from mapa.services.zone_catalog import ZoneCatalog

UNKNOWN_LABEL = "Unknown"

class PlacesService:
    def __init__(
        self,
        zones: ZoneCatalog,
        base_url: str = None,
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.zones = zones
        self.overpass_url = base_url or settings.OVERPASS_URL
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.transport = transport

    async def fetch(self, category: str, zone) -> list[Marker]:
        """
        Points of interest tagged ``category`` inside a zone's circle.
        The "all" zone never reaches Overpass: an unscoped query would cover the whole planet.
        """
        if not zone or zone == ALL:
            logs.log(logging.INFO, f"Skipping POI query for category '{category}': no zone selected")
            return []

        target = self.zones.get(zone)
        query = self.build_query(category, target)
        logs.log(logging.INFO, f"Querying Overpass for '{category}' in zone {target.key.value} (radius {target.radius:.0f}m)")

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.get(
                    self.overpass_url,
                    params={"data": query},
                    headers={"User-Agent": settings.USER_AGENT},
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logs.log(logging.ERROR, f"Overpass API failed: {str(e)}")
                raise UpstreamServiceError("overpass", str(e)) from e

        markers = []
        for element in data.get("elements", []):
            marker = self._to_marker(element, category)
            if marker is not None:
                markers.append(marker)

        logs.log(logging.INFO, f"Overpass returned {len(markers)} points for '{category}' in {target.key.value}")
        return markers

    @staticmethod
    def build_query(category: str, zone: Zone) -> str:
        """Overpass QL for nodes carrying ``category`` around the zone center."""
        return (
            f"[out:json];node[{category}]"
            f"(around:{zone.radius:.0f},{zone.center.lat},{zone.center.lon});out;"
        )

    def _to_marker(self, element: dict, category: str) -> Marker | None:
        lat = element.get("lat")
        lon = element.get("lon")
        if lat is None or lon is None:
            logs.log(logging.DEBUG, f"Skipping element without coordinates: {element.get('id')}")
            return None

        tags = element.get("tags") or {}
        return Marker(
            coordinates=Coordinates(lat=lat, lon=lon),
            label=tags.get("name") or UNKNOWN_LABEL,
            category=category,
            source_id=element.get("id"),
        )
