"""
HTTP surface: session lifecycle, filter and search endpoints, stateless lookups.
"""

import pytest
from fastapi.testclient import TestClient

from fakes import FakeGeocoder, FakePlaces
from mapa.core.exceptions import UpstreamServiceError
from mapa.main import app
from mapa.models.base_model import Coordinates
from mapa.routes.lookup_route import get_geocoding_service, get_places_service
from mapa.routes.map_route import get_session_manager
from mapa.services.filter_coordinator import FilterCoordinator
from mapa.services.session_state import SessionStateManager
from mapa.services.zone_catalog import ZoneCatalog


PAULISTA = "Avenida Paulista, 1000"
KNOWN = {PAULISTA: Coordinates(lat=-23.561, lon=-46.656)}


class Wiring:
    """Builds coordinators on fakes and remembers the POI source of the latest one."""

    def __init__(self):
        self.places = None

    def __call__(self):
        zones = ZoneCatalog()
        self.places = FakePlaces(zones)
        return FilterCoordinator(geocoder=FakeGeocoder(KNOWN), places=self.places, zones=zones)


@pytest.fixture
def wiring():
    return Wiring()


@pytest.fixture
def client(wiring):
    manager = SessionStateManager(coordinator_factory=wiring, seed_addresses=[])
    app.dependency_overrides[get_session_manager] = lambda: manager
    app.dependency_overrides[get_geocoding_service] = lambda: FakeGeocoder(KNOWN)
    app.dependency_overrides[get_places_service] = lambda: FakePlaces(ZoneCatalog())
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client):
    return client.post("/sessions").json()["session_id"]


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestSessionLifecycle:

    def test_new_session_starts_unfiltered(self, client):
        response = client.post("/sessions")

        assert response.status_code == 201
        body = response.json()
        assert body["filters"] == {"location_filter": "all", "event_filter": "all", "search_address": ""}
        assert body["markers"] == []
        assert body["view"]["zoom"] == 11
        assert {z["key"] for z in body["zones"]} == {"norte", "sul", "leste", "oeste"}

    def test_get_and_delete(self, client, session_id):
        assert client.get(f"/sessions/{session_id}").status_code == 200
        assert client.delete(f"/sessions/{session_id}").status_code == 204
        assert client.get(f"/sessions/{session_id}").status_code == 404

    def test_unknown_session(self, client):
        assert client.put("/sessions/nope/filters/location", json={"value": "norte"}).status_code == 404
        assert client.delete("/sessions/nope").status_code == 404


class TestFilterEndpoints:

    def test_location_filter_replaces_markers(self, client, session_id):
        response = client.put(f"/sessions/{session_id}/filters/location", json={"value": "norte"})

        assert response.status_code == 200
        body = response.json()
        assert body["filters"]["location_filter"] == "norte"
        assert [m["label"] for m in body["markers"]] == ["amenity@norte:5000"]

    def test_event_filter_scoped_to_zone(self, client, session_id):
        client.put(f"/sessions/{session_id}/filters/location", json={"value": "sul"})
        body = client.put(f"/sessions/{session_id}/filters/event", json={"value": "theatre"}).json()

        assert body["filters"]["event_filter"] == "theatre"
        assert [m["category"] for m in body["markers"]] == ["theatre"]

    def test_invalid_values_are_rejected(self, client, session_id):
        assert client.put(f"/sessions/{session_id}/filters/location", json={"value": "centro"}).status_code == 422
        assert client.put(f"/sessions/{session_id}/filters/event", json={"value": "opera"}).status_code == 422

    def test_upstream_failure_is_bad_gateway(self, client, wiring, session_id):
        wiring.places.error = UpstreamServiceError("overpass", "timeout")

        response = client.put(f"/sessions/{session_id}/filters/location", json={"value": "leste"})

        assert response.status_code == 502
        assert client.get(f"/sessions/{session_id}").json()["filters"]["location_filter"] == "leste"


class TestSearchEndpoint:

    def test_hit_appends_marker_and_recenters(self, client, session_id):
        body = client.post(f"/sessions/{session_id}/search", json={"address": PAULISTA}).json()

        assert [m["label"] for m in body["markers"]] == [PAULISTA]
        assert body["view"] == {"center": {"lat": -23.561, "lon": -46.656}, "zoom": 15}

    def test_miss_is_not_found(self, client, session_id):
        response = client.post(f"/sessions/{session_id}/search", json={"address": "Rua Inexistente, 0"})

        assert response.status_code == 404
        assert response.json()["detail"] == "address not found"
        assert client.get(f"/sessions/{session_id}").json()["markers"] == []


class TestZoneGrowthEndpoint:

    def test_default_step(self, client, session_id):
        body = client.post(f"/sessions/{session_id}/zones/norte/grow").json()
        radii = {z["key"]: z["radius"] for z in body["zones"]}
        assert radii["norte"] == 6000
        assert radii["sul"] == 5000

    def test_explicit_delta(self, client, session_id):
        body = client.post(f"/sessions/{session_id}/zones/oeste/grow", json={"delta": 250}).json()
        assert {z["key"]: z["radius"] for z in body["zones"]}["oeste"] == 5250

    def test_growth_is_per_session(self, client, session_id):
        client.post(f"/sessions/{session_id}/zones/leste/grow")
        other = client.post("/sessions").json()
        assert {z["key"]: z["radius"] for z in other["zones"]}["leste"] == 5000

    def test_rejections(self, client, session_id):
        assert client.post(f"/sessions/{session_id}/zones/centro/grow").status_code == 422
        assert client.post(f"/sessions/{session_id}/zones/sul/grow", json={"delta": -9000}).status_code == 400


class TestMapEndpoint:

    def test_map_html_contains_markers(self, client, session_id):
        client.post(f"/sessions/{session_id}/search", json={"address": PAULISTA})

        response = client.get(f"/sessions/{session_id}/map")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert PAULISTA in response.text
        assert "leaflet" in response.text.lower()


class TestLookupEndpoints:

    def test_geocode_hit_and_miss(self, client):
        assert client.get("/geocode", params={"q": PAULISTA}).json() == {"lat": -23.561, "lon": -46.656}
        assert client.get("/geocode", params={"q": "Lugar Nenhum"}).status_code == 404

    def test_points_in_zone(self, client):
        body = client.get("/points", params={"category": "sports", "zone": "norte"}).json()
        assert body["category"] == "sports"
        assert [m["label"] for m in body["markers"]] == ["sports@norte:5000"]

    def test_points_for_all_is_empty(self, client):
        assert client.get("/points", params={"category": "sports", "zone": "all"}).json()["markers"] == []

    def test_points_rejects_query_injection(self, client):
        response = client.get("/points", params={"category": "amenity];out;", "zone": "norte"})
        assert response.status_code == 422

    def test_points_accepts_tag_value_filter(self, client):
        body = client.get("/points", params={"category": "amenity=fast_food", "zone": "sul"}).json()
        assert body["category"] == "amenity=fast_food"

    def test_points_rejects_spaces_in_tag_value(self, client):
        response = client.get("/points", params={"category": "amenity=fast food", "zone": "sul"})
        assert response.status_code == 422
