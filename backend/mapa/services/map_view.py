import folium
from typing import Iterable, Optional
from mapa.core.config import settings
from mapa.models.base_model import MapViewState, Marker, Zone

ZONE_COLORS = {
    "norte": "blue",
    "sul": "green",
    "leste": "red",
    "oeste": "yellow",
}
DEFAULT_ZONE_COLOR = "black"

ICON_URLS = {
    "theatre": "https://example.com/path-to-theatre-icon.png",
    "arts_centre": "https://example.com/path-to-arts-centre-icon.png",
    "sports": "https://example.com/path-to-sports-icon.png",
    "battle_rap": "https://example.com/path-to-battle-rap-icon.png",
}
DEFAULT_ICON_URL = "https://example.com/path-to-default-icon.png"

ICON_SIZE = (25, 41)
ICON_ANCHOR = (12, 41)
POPUP_ANCHOR = (1, -34)


def zone_color(zone_key) -> str:
    return ZONE_COLORS.get(getattr(zone_key, "value", zone_key), DEFAULT_ZONE_COLOR)


def icon_url(category: Optional[str]) -> str:
    """Icon for a marker category; search hits and unknown categories get the default pin."""
    if category is None:
        return DEFAULT_ICON_URL
    return ICON_URLS.get(category, DEFAULT_ICON_URL)


def build_icon(category: Optional[str]) -> folium.CustomIcon:
    return folium.CustomIcon(
        icon_url(category),
        icon_size=ICON_SIZE,
        icon_anchor=ICON_ANCHOR,
        popup_anchor=POPUP_ANCHOR,
    )


def build_map(view: MapViewState, zones: Iterable[Zone], markers: Iterable[Marker]) -> folium.Map:
    """Base tiles, one circle per zone and one pin per marker."""
    m = folium.Map(
        location=[view.center.lat, view.center.lon],
        zoom_start=view.zoom,
        tiles=settings.TILE_URL,
        attr=settings.TILE_ATTRIBUTION,
    )

    for zone in zones:
        folium.Circle(
            location=[zone.center.lat, zone.center.lon],
            radius=zone.radius,
            color=zone_color(zone.key),
            fill=False,
            tooltip=f"Zona {zone.key.value.capitalize()} ({zone.radius:.0f} m)",
        ).add_to(m)

    for marker in markers:
        folium.Marker(
            location=[marker.coordinates.lat, marker.coordinates.lon],
            popup=folium.Popup(marker.label, parse_html=True),
            icon=build_icon(marker.category),
        ).add_to(m)

    return m


def render_map_html(view: MapViewState, zones: Iterable[Zone], markers: Iterable[Marker]) -> str:
    return build_map(view, zones, markers).get_root().render()
