import httpx
import logging
from typing import Optional
from mapa.core.config import settings
from mapa.core.logger import logs
from mapa.models.base_model import Coordinates

class GeocodingService:
    def __init__(
        self,
        base_url: str = None,
        user_agent: str = None,
        timeout: Optional[float] = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.base_url = base_url or settings.NOMINATIM_URL
        self.user_agent = user_agent or settings.USER_AGENT
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.transport = transport

    async def resolve(self, address: str) -> Coordinates | None:
        """
        Calls Nominatim for a free-text address.
        Returns the first hit's coordinates, or None when nothing matched or the lookup failed.
        """
        logs.log(logging.INFO, f"Geocoding address: {address}")
        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                resp = await client.get(
                    self.base_url,
                    params={'q': address, 'format': 'json', 'limit': 1},
                    headers={'User-Agent': self.user_agent},
                    timeout=self.timeout
                )
                resp.raise_for_status()
                data = resp.json()
            except (httpx.HTTPError, ValueError) as e:
                logs.log(logging.ERROR, f"Geocoding API error: {str(e)}", extra={"address": address})
                return None

        if not data:
            logs.log(logging.WARNING, f"No geocoding result for: {address}")
            return None

        item = data[0]
        try:
            return Coordinates(lat=float(item['lat']), lon=float(item['lon']))
        except (KeyError, TypeError, ValueError) as e:
            logs.log(logging.ERROR, f"Malformed geocoding result for {address}: {str(e)}")
            return None
