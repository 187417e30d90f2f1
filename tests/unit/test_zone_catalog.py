"""
ZoneCatalog: initial table, radius growth, invariants.
"""

import pytest

from mapa.core.exceptions import InvalidRadiusError, UnknownZoneError
from mapa.models.base_model import Coordinates, ZoneKey
from mapa.services.zone_catalog import ZoneCatalog, initial_zones


class TestInitialZones:

    def test_four_zones_with_default_radius(self):
        zones = ZoneCatalog().zones()
        assert {z.key for z in zones} == set(ZoneKey)
        assert all(z.radius == 5000 for z in zones)

    def test_norte_center(self):
        assert ZoneCatalog().get("norte").center == Coordinates(lat=-23.490, lon=-46.650)

    def test_custom_radius(self):
        catalog = ZoneCatalog(initial_zones(radius=800))
        assert catalog.get(ZoneKey.SUL).radius == 800

    def test_unknown_key(self):
        with pytest.raises(UnknownZoneError):
            ZoneCatalog().get("centro")


class TestGrowZoneRadius:

    def test_default_step_is_1000(self):
        catalog = ZoneCatalog()
        grown = catalog.grow_zone_radius("oeste")
        assert grown.radius == 6000
        assert catalog.get("oeste").radius == 6000

    def test_growth_is_cumulative(self):
        catalog = ZoneCatalog()
        catalog.grow_zone_radius("leste")
        catalog.grow_zone_radius("leste")
        assert catalog.get("leste").radius == 7000

    def test_previously_returned_zone_keeps_radius(self):
        catalog = ZoneCatalog()
        before = catalog.get("norte")
        catalog.grow_zone_radius("norte")
        assert before.radius == 5000

    def test_radius_must_stay_positive(self):
        catalog = ZoneCatalog()
        with pytest.raises(InvalidRadiusError):
            catalog.grow_zone_radius("sul", -5000)
        assert catalog.get("sul").radius == 5000

    def test_unknown_zone_cannot_grow(self):
        with pytest.raises(UnknownZoneError):
            ZoneCatalog().grow_zone_radius("centro")

    def test_catalogs_are_independent(self):
        first, second = ZoneCatalog(), ZoneCatalog()
        first.grow_zone_radius("norte")
        assert second.get("norte").radius == 5000
