from pathlib import Path

from opr_builder.persistence.storage import DATASET_KEY, SELECTED_ROUTE_KEY, FileStorage
from opr_builder.schemas.dataset import DEFAULT_OPR_DATA
from opr_builder.services.editing.store import EditorStore


def test_file_storage_creates_state_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    assert storage.state_root.exists()
    assert storage.state_root.is_dir()
    assert storage.state_root.parent == tmp_path.resolve()


def test_file_storage_round_trips_json_values(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    storage.set(SELECTED_ROUTE_KEY, 3)
    storage.set("opr-selected-waypoint", None)

    assert storage.get(SELECTED_ROUTE_KEY) == 3
    assert storage.get("opr-selected-waypoint") is None
    assert storage.get("missing-key") is None
    assert storage.path_for(SELECTED_ROUTE_KEY).read_text(encoding="utf-8") == "3"


def test_file_storage_ignores_corrupt_files(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    storage.path_for(DATASET_KEY).write_text("{broken", encoding="utf-8")

    assert storage.get(DATASET_KEY) is None


def test_store_writes_through_to_disk(tmp_path: Path) -> None:
    store = EditorStore(FileStorage(root=tmp_path))
    store.add_route()
    store.update_city(city="Jaro")

    reloaded = EditorStore(FileStorage(root=tmp_path))

    assert reloaded.dataset.city == "Jaro"
    assert reloaded.dataset.routes[0].route_code == "01"
    assert reloaded.selection.route_index == 0
    assert reloaded.dataset.latitude == DEFAULT_OPR_DATA.latitude
