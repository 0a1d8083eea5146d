"""Location lookup package."""

from vadi_hisaab.locations.hierarchy import LocationHierarchy, get_location_hierarchy

__all__ = ["LocationHierarchy", "get_location_hierarchy"]
