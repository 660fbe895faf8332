"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class RouteGeometry:
    """Street-following path between a route's waypoints."""

    coordinates: List[tuple[float, float]] = field(default_factory=list)
    distance_m: float = 0.0
    duration_s: float = 0.0
