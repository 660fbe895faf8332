"""Route group exports."""

from . import dataset, health, map_view, routes, settings, waypoints

__all__ = ["dataset", "health", "map_view", "routes", "settings", "waypoints"]
