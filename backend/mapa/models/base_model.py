from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional, List, Union
from enum import Enum

ALL = "all"

# --- Enums ---
class ZoneKey(str, Enum):
    NORTE = "norte"
    SUL = "sul"
    LESTE = "leste"
    OESTE = "oeste"

class EventCategory(str, Enum):
    THEATRE = "theatre"
    ARTS_CENTRE = "arts_centre"
    SPORTS = "sports"
    BATTLE_RAP = "battle_rap"

# --- Domain Models ---
class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float

class Zone(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: ZoneKey
    center: Coordinates
    radius: float = Field(..., gt=0, description="Radius in meters")

class Marker(BaseModel):
    coordinates: Coordinates
    label: str
    category: Optional[str] = None
    source_id: Optional[int] = None  # Overpass element id, when the marker came from a POI query

class FilterState(BaseModel):
    """
    The single mutable-by-replacement filter value of a map session.
    Transitions build a new instance instead of editing this one.
    """
    model_config = ConfigDict(frozen=True)

    location_filter: Union[Literal["all"], ZoneKey] = ALL
    event_filter: Union[Literal["all"], EventCategory] = ALL
    search_address: str = ""

class MapViewState(BaseModel):
    model_config = ConfigDict(frozen=True)

    center: Coordinates
    zoom: int

# --- API Request/Response Models ---
class LocationFilterRequest(BaseModel):
    value: Union[Literal["all"], ZoneKey] = Field(..., description="'all' or a zone key")

class EventFilterRequest(BaseModel):
    value: Union[Literal["all"], EventCategory] = Field(..., description="'all' or an event category")

class SearchRequest(BaseModel):
    address: str = Field(..., description="Free-text address to geocode")

class GrowZoneRequest(BaseModel):
    delta: Optional[float] = Field(None, description="Meters to add; defaults to the configured step")

class SessionSnapshot(BaseModel):
    session_id: str
    filters: FilterState
    view: MapViewState
    markers: List[Marker] = []
    zones: List[Zone] = []
