import pytest

from opr_builder.models.domain import Selection
from opr_builder.persistence.storage import (
    API_KEY_KEY,
    DATASET_KEY,
    SELECTED_ROUTE_KEY,
    SELECTED_WAYPOINT_KEY,
    InMemoryStorage,
)
from opr_builder.schemas.dataset import DEFAULT_OPR_DATA
from opr_builder.services.editing.errors import IndexOutOfRange, NoRouteSelected
from opr_builder.services.editing.store import EditorStore


def _store_with_route(storage, waypoint_count: int = 0) -> EditorStore:
    store = EditorStore(storage)
    store.add_route()
    for i in range(waypoint_count):
        store.add_waypoint(10.70 + i * 0.001, 122.56)
    return store


def test_starts_from_default_dataset(storage):
    store = EditorStore(storage)

    assert store.dataset == DEFAULT_OPR_DATA
    assert store.selection == Selection()
    assert store.api_key == ""


def test_add_route_selects_new_route_and_writes_through(storage):
    store = EditorStore(storage)
    store.add_route()
    store.add_route()

    index = store.add_route()

    assert index == 2
    assert store.selection == Selection(route_index=2, waypoint_index=None)
    assert store.dataset.routes[2].route_code == "03"
    assert storage.get(DATASET_KEY)["routes"][2]["name"] == "Route 3"
    assert storage.get(SELECTED_ROUTE_KEY) == 2


def test_state_is_restored_from_storage(storage):
    store = _store_with_route(storage, waypoint_count=2)
    store.select_waypoint(0)

    restored = EditorStore(storage)

    assert restored.dataset == store.dataset
    assert restored.selection == Selection(route_index=0, waypoint_index=0)


def test_corrupt_persisted_values_fall_back_to_defaults():
    storage = InMemoryStorage({DATASET_KEY: {"routes": "nope"}, SELECTED_ROUTE_KEY: "x", SELECTED_WAYPOINT_KEY: 3})
    storage.values[API_KEY_KEY] = "{not json"

    store = EditorStore(storage, fallback_api_key="pk.fallback")

    assert store.dataset == DEFAULT_OPR_DATA
    assert store.selection == Selection()
    assert store.api_key == "pk.fallback"


def test_add_waypoint_selects_it(storage):
    store = _store_with_route(storage)

    index = store.add_waypoint(10.71, 122.55)

    assert index == 0
    assert store.selection == Selection(route_index=0, waypoint_index=0)
    assert store.current_waypoints[0].latitude == 10.71


def test_add_waypoint_requires_selected_route(storage):
    store = EditorStore(storage)

    with pytest.raises(NoRouteSelected):
        store.add_waypoint(10.7, 122.5)


def test_add_waypoint_refused_at_limit(storage):
    store = _store_with_route(storage, waypoint_count=50)
    writes_before = len(storage.writes)

    assert store.add_waypoint(10.7, 122.5) is None
    assert len(store.current_waypoints) == 50
    assert len(storage.writes) == writes_before


def test_limit_is_configurable(storage):
    store = EditorStore(storage, max_waypoints_per_route=2)
    store.add_route()
    store.add_waypoint(1.0, 1.0)
    store.add_waypoint(2.0, 2.0)

    assert store.add_waypoint(3.0, 3.0) is None


def test_deleting_selected_waypoint_clears_waypoint_selection(storage):
    store = _store_with_route(storage, waypoint_count=3)
    store.select_waypoint(1)

    store.delete_waypoint(1)

    assert store.selection == Selection(route_index=0, waypoint_index=None)
    assert [waypoint.sequence for waypoint in store.current_waypoints] == [1, 2]
    assert storage.get(SELECTED_WAYPOINT_KEY) is None


def test_deleting_selected_route_clears_both(storage):
    store = _store_with_route(storage, waypoint_count=2)
    store.select_waypoint(1)

    store.delete_route(0)

    assert store.selection == Selection()
    assert store.dataset.routes == ()


def test_selecting_other_route_resets_waypoint(storage):
    store = _store_with_route(storage, waypoint_count=2)
    store.add_route()
    store.select_route(0)
    store.select_waypoint(1)

    store.select_route(1)

    assert store.selection == Selection(route_index=1, waypoint_index=None)


def test_select_waypoint_without_route_is_noop(storage):
    store = EditorStore(storage)

    assert store.select_waypoint(0) == Selection()


def test_select_route_out_of_range(storage):
    store = EditorStore(storage)

    with pytest.raises(IndexOutOfRange):
        store.select_route(0)


def test_update_waypoint_applies_fields_without_renumbering(storage):
    store = _store_with_route(storage, waypoint_count=2)

    updated = store.update_waypoint(1, street="Diversion Rd", sequence=7)

    assert updated.street == "Diversion Rd"
    assert [waypoint.sequence for waypoint in store.current_waypoints] == [1, 7]


def test_replace_dataset_keeps_selection(storage):
    store = _store_with_route(storage, waypoint_count=1)
    selection = store.selection

    store.replace_dataset(DEFAULT_OPR_DATA)

    assert store.dataset == DEFAULT_OPR_DATA
    assert store.selection == selection
    assert store.current_waypoints == ()


def test_listeners_receive_previous_and_current(storage):
    store = EditorStore(storage)
    seen = []
    store.subscribe(lambda previous, current: seen.append((previous.selection, current.selection)))

    store.add_route()

    assert seen == [(Selection(), Selection(route_index=0))]


def test_api_key_is_persisted(storage):
    store = EditorStore(storage)

    store.set_api_key("  pk.test-token  ")

    assert storage.get(API_KEY_KEY) == "pk.test-token"
    assert EditorStore(storage).api_key == "pk.test-token"
