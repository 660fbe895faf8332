"""Serialize the dataset to its JSON exchange document."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone

from ...schemas.dataset import OPRDataset


def dataset_to_json(dataset: OPRDataset) -> dict:
    return dataset.model_dump(mode="json")


def export_dataset(dataset: OPRDataset, *, indent: int = 2) -> str:
    return json.dumps(dataset_to_json(dataset), ensure_ascii=False, indent=indent)


def export_filename(dataset: OPRDataset, now: datetime | None = None) -> str:
    """Download name such as ``opr-iloilo-city-1700000000000.json``."""
    moment = now or datetime.now(timezone.utc)
    slug = re.sub(r"\s+", "-", dataset.city.lower())
    return f"opr-{slug}-{int(moment.timestamp() * 1000)}.json"
