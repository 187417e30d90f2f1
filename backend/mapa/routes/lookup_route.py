from fastapi import APIRouter, Depends, HTTPException, Query

from mapa.core.exceptions import MapaError
from mapa.models.base_model import Coordinates
from mapa.models.places_model import PointsResponse
from mapa.services.Geocoding_service import GeocodingService
from mapa.services.Places_service import PlacesService
from mapa.services.zone_catalog import ZoneCatalog

router = APIRouter(tags=["lookup"])

# --- Dependency Injection ---
def get_geocoding_service() -> GeocodingService:
    return GeocodingService()

def get_places_service() -> PlacesService:
    # Stateless lookups use the initial zone table, not a session's grown radii
    return PlacesService(ZoneCatalog())

@router.get("/geocode", response_model=Coordinates)
async def geocode_endpoint(
    q: str = Query(..., min_length=1, description="Free-text address"),
    service: GeocodingService = Depends(get_geocoding_service),
):
    coordinates = await service.resolve(q)
    if coordinates is None:
        raise HTTPException(status_code=404, detail="address not found")
    return coordinates

@router.get("/points", response_model=PointsResponse)
async def points_endpoint(
    category: str = Query(..., pattern=r"^[A-Za-z0-9_:]+(=[A-Za-z0-9_:-]+)?$", description="OSM tag key or key=value filter"),
    zone: str = Query(..., description="Zone key or 'all'"),
    service: PlacesService = Depends(get_places_service),
):
    try:
        markers = await service.fetch(category, zone)
    except MapaError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return PointsResponse(category=category, zone=zone, markers=markers)
