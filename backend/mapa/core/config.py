from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    LOGGER: int = 20
    LOG_DIR: str = "logs"
    LOG_FILE: str = "mapa.log"
    LOG_MAX_BYTES: int = 10 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 5

    # Servers
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # External services
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org/search"
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    USER_AGENT: str = "MapaZonas/1.0"
    HTTP_TIMEOUT: Optional[float] = None  # None = wait until the upstream answers

    # Map rendering
    TILE_URL: str = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
    TILE_ATTRIBUTION: str = "&copy; OpenStreetMap contributors"
    MAP_CENTER_LAT: float = -23.55052
    MAP_CENTER_LON: float = -46.633308
    MAP_ZOOM: int = 11
    SEARCH_ZOOM: int = 15

    # Filters and zones
    DEFAULT_POI_CATEGORY: str = "amenity"
    ZONE_RADIUS_M: float = 5000
    ZONE_RADIUS_STEP: float = 1000

    # Markers geocoded when a session starts
    LOAD_SEED_MARKERS: bool = True
    SEED_ADDRESSES: List[str] = [
        "Avenida Paulista, 1000, Bela Vista, São Paulo",
        "Rua Augusta, 1500, Consolação, São Paulo",
        "Praça da Sé, Sé, São Paulo",
        "Avenida Brás Leme, 1000, Santana, São Paulo",
        "Avenida Indianópolis, 1000, Moema, São Paulo",
    ]

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
