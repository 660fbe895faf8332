"""Dataset import/export services."""

from .exporter import dataset_to_json, export_dataset, export_filename
from .importer import ImportSummary, enrich_missing_coordinates, import_dataset, parse_dataset

__all__ = [
    "dataset_to_json",
    "export_dataset",
    "export_filename",
    "ImportSummary",
    "enrich_missing_coordinates",
    "import_dataset",
    "parse_dataset",
]
