import json

import pytest

from conftest import DummyGeocoder
from opr_builder.schemas.dataset import DEFAULT_OPR_DATA, OPRDataset, Route, Waypoint
from opr_builder.services.editing.errors import InvalidDatasetFormat
from opr_builder.services.exchange import export_dataset, import_dataset
from opr_builder.services.mapsync.canvas import ViewStateCanvas
from opr_builder.services.session import EditorSession


def _waypoint(sequence: int, lat: float, lng: float, street: str = "Iznart St", destination: str = "Plaza Libertad") -> Waypoint:
    return Waypoint(
        sequence=sequence,
        sub_locality="City Proper",
        sub_locality_type="district",
        street=street,
        destination=destination,
        latitude=lat,
        longitude=lng,
    )


def _dataset(*waypoints: Waypoint) -> OPRDataset:
    route = Route(route_code="01", name="Jaro - City Proper", waypoints=waypoints)
    return DEFAULT_OPR_DATA.model_copy(update={"routes": (route,)})


def test_round_trip_without_zero_coordinates(geocoder):
    dataset = _dataset(_waypoint(1, 10.72, 122.56), _waypoint(2, 10.73, 122.55))

    summary = import_dataset(export_dataset(dataset), geocoder, "pk.test")

    assert summary.dataset == dataset
    assert summary.enriched_count == 0
    assert summary.message == "JSON imported successfully"
    assert geocoder.calls == []


def test_export_uses_exchange_field_names():
    document = json.loads(export_dataset(_dataset(_waypoint(1, 10.72, 122.56))))

    assert list(document) == [
        "country",
        "country_code",
        "island_group",
        "region",
        "region_code",
        "province",
        "province_code",
        "city",
        "city_type",
        "postal_code",
        "latitude",
        "longitude",
        "routes",
    ]
    assert list(document["routes"][0]) == ["route_code", "name", "waypoints"]
    assert list(document["routes"][0]["waypoints"][0]) == [
        "sequence",
        "sub_locality",
        "sub_locality_type",
        "street",
        "destination",
        "latitude",
        "longitude",
    ]


def test_zero_coordinates_are_geocoded_near_city(geocoder):
    dataset = _dataset(_waypoint(1, 10.72, 122.56), _waypoint(2, 0, 0))

    summary = import_dataset(export_dataset(dataset), geocoder, "pk.test")

    enriched = summary.dataset.routes[0].waypoints[1]
    assert (enriched.latitude, enriched.longitude) == (14.55, 121.05)
    assert summary.enriched_count == 1
    assert summary.message == "JSON imported with 1 waypoint(s) geocoded"

    api_key, query, proximity = geocoder.calls[0]
    assert api_key == "pk.test"
    assert query == "Iznart St Plaza Libertad"
    assert (proximity.latitude, proximity.longitude) == (DEFAULT_OPR_DATA.latitude, DEFAULT_OPR_DATA.longitude)


def test_single_zero_axis_triggers_lookup_in_document_order(geocoder):
    dataset = _dataset(
        _waypoint(1, 10.72, 0, street="Ledesma St", destination=""),
        _waypoint(2, 10.73, 122.55),
        _waypoint(3, 0, 122.55, street="", destination="Molo Church"),
    )

    summary = import_dataset(export_dataset(dataset), geocoder, "pk.test")

    assert [call[1] for call in geocoder.calls] == ["Ledesma St", "Molo Church"]
    assert summary.enriched_count == 2


def test_blank_query_is_not_looked_up(geocoder):
    dataset = _dataset(_waypoint(1, 0, 0, street="  ", destination=""))

    summary = import_dataset(export_dataset(dataset), geocoder, "pk.test")

    assert geocoder.calls == []
    assert summary.enriched_count == 0


def test_no_match_keeps_zero_coordinates():
    geocoder = DummyGeocoder(results=[])
    dataset = _dataset(_waypoint(1, 0, 0))

    summary = import_dataset(export_dataset(dataset), geocoder, "pk.test")

    assert summary.dataset == dataset
    assert summary.enriched_count == 0
    assert len(geocoder.calls) == 1


def test_without_api_key_enrichment_is_skipped(geocoder):
    dataset = _dataset(_waypoint(1, 0, 0))

    summary = import_dataset(export_dataset(dataset), geocoder, "")

    assert summary.dataset == dataset
    assert geocoder.calls == []


@pytest.mark.parametrize(
    "raw_text",
    [
        "{not json",
        "[]",
        json.dumps({"city": "Iloilo City"}),
        json.dumps({**json.loads(export_dataset(DEFAULT_OPR_DATA)), "island_group": "Palawan"}),
    ],
)
def test_invalid_documents_are_rejected(raw_text, geocoder):
    with pytest.raises(InvalidDatasetFormat):
        import_dataset(raw_text, geocoder, "pk.test")
    assert geocoder.calls == []


def test_invalid_import_leaves_session_unchanged(storage, geocoder):
    session = EditorSession.create(storage=storage, geocoder=geocoder, canvas=ViewStateCanvas())
    session.store.add_route()
    before = session.store.dataset
    writes_before = len(storage.writes)

    with pytest.raises(InvalidDatasetFormat) as excinfo:
        session.import_json('{"routes": [')

    assert excinfo.value.user_message == "Invalid JSON format"
    assert session.store.dataset == before
    assert len(storage.writes) == writes_before


def test_session_import_replaces_dataset_and_keeps_selection(storage, geocoder):
    session = EditorSession.create(storage=storage, geocoder=geocoder, canvas=ViewStateCanvas())
    session.store.set_api_key("pk.test")
    session.store.add_route()
    session.store.add_route()
    selection = session.store.selection
    incoming = _dataset(_waypoint(1, 0, 0)).model_copy(update={"city": "Passi City"})

    summary = session.import_json(export_dataset(incoming))

    assert summary.enriched_count == 1
    assert session.store.dataset.city == "Passi City"
    assert len(session.store.dataset.routes) == 1
    assert session.store.selection == selection
