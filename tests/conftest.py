"""
Shared fixtures: fake lookup collaborators and a wired coordinator.
"""

import asyncio
import os
import tempfile

# Settings are read at import time; keep test runs off the network and out of ./logs
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "mapa-test-logs"))
os.environ.setdefault("LOAD_SEED_MARKERS", "false")

import pytest

from fakes import FakeGeocoder, FakePlaces
from mapa.models.base_model import Coordinates
from mapa.services.filter_coordinator import FilterCoordinator
from mapa.services.zone_catalog import ZoneCatalog


@pytest.fixture
def zones():
    return ZoneCatalog()


@pytest.fixture
def geocoder():
    return FakeGeocoder({"Avenida Paulista, 1000": Coordinates(lat=-23.561, lon=-46.656)})


@pytest.fixture
def places(zones):
    return FakePlaces(zones)


@pytest.fixture
def coordinator(geocoder, places, zones):
    return FilterCoordinator(geocoder=geocoder, places=places, zones=zones)


@pytest.fixture
def run():
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run
