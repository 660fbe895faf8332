import os
import tempfile

# Settings are read once at import time; keep test runs away from ./data and real credentials.
os.environ.setdefault("OPR_DATA_ROOT", tempfile.mkdtemp(prefix="opr-tests-"))
os.environ.pop("OPR_MAPBOX_API_KEY", None)
os.environ.pop("OPR_OSRM_BASE_URL", None)

import pytest

from opr_builder.models.domain import Coordinate
from opr_builder.persistence.storage import InMemoryStorage
from opr_builder.services.geocoding.models import GeocodingResult
from opr_builder.services.routing.models import RouteGeometry


class DummyGeocoder:
    """Returns the same match for every query and records each call."""

    def __init__(self, results=None):
        self.results = (
            results
            if results is not None
            else [GeocodingResult(display_name="SM City, Iloilo", short_label="SM City", longitude=121.05, latitude=14.55)]
        )
        self.calls: list[tuple[str, str, Coordinate | None]] = []

    def search(self, api_key, query, proximity=None):
        self.calls.append((api_key, query, proximity))
        return list(self.results)


class DummyDirections:
    def __init__(self, fail_with: Exception | None = None):
        self.fail_with = fail_with
        self.calls: list[tuple[tuple[float, float], ...]] = []

    def route(self, coordinates):
        self.calls.append(tuple(coordinates))
        if self.fail_with is not None:
            raise self.fail_with
        return RouteGeometry(coordinates=list(coordinates), distance_m=1200.0, duration_s=240.0)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def geocoder() -> DummyGeocoder:
    return DummyGeocoder()


@pytest.fixture
def directions() -> DummyDirections:
    return DummyDirections()
