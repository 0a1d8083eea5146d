"""
Location Hierarchy

Static three-level lookup tree: region -> sub-region -> settlement.

DESIGN DECISION: The tree is indexed once at startup and is read-only
afterwards. Callers only get the query methods below, never the underlying
maps, so the representation can change without touching them.

Lookups never raise for unknown keys:
- listing children of an unknown parent gives an empty list
- resolving a label for an unknown key gives the key back, so a stale or
  foreign key still renders as something visible
"""

from collections.abc import Mapping
from functools import lru_cache
from typing import Optional, Union

from pydantic.alias_generators import to_camel

from vadi_hisaab.locations.gujarat import GUJARAT_LOCATIONS
from vadi_hisaab.models.location import LocationItem, LocationKind, LocationPath


KeysLike = Union[LocationPath, Mapping[str, Optional[str]]]


class _SubRegionNode:
    __slots__ = ("item", "settlements")

    def __init__(self, item: LocationItem, settlements: dict[str, LocationItem]):
        self.item = item
        self.settlements = settlements


class _RegionNode:
    __slots__ = ("item", "sub_regions")

    def __init__(self, item: LocationItem, sub_regions: dict[str, _SubRegionNode]):
        self.item = item
        self.sub_regions = sub_regions


def _index_unique(items, level: str, parent: str) -> None:
    seen = set()
    for key, *_ in items:
        if key in seen:
            raise ValueError(f"Duplicate {level} key '{key}' under '{parent}'")
        seen.add(key)


class LocationHierarchy:
    """
    Immutable region -> sub-region -> settlement tree.

    Build it from nested (key, label, children) tuples; settlements are
    (key, label) pairs. Declaration order is preserved everywhere.
    """

    def __init__(self, tree):
        _index_unique(tree, "region", "<root>")
        regions: dict[str, _RegionNode] = {}

        for region_key, region_label, sub_regions in tree:
            _index_unique(sub_regions, "sub-region", region_key)
            sub_nodes: dict[str, _SubRegionNode] = {}

            for sub_key, sub_label, settlements in sub_regions:
                _index_unique(settlements, "settlement", f"{region_key}/{sub_key}")
                sub_nodes[sub_key] = _SubRegionNode(
                    item=LocationItem(key=sub_key, label=sub_label),
                    settlements={
                        key: LocationItem(key=key, label=label)
                        for key, label in settlements
                    },
                )

            regions[region_key] = _RegionNode(
                item=LocationItem(key=region_key, label=region_label),
                sub_regions=sub_nodes,
            )

        if not regions:
            raise ValueError("Location tree must contain at least one region")

        self._regions = regions

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_regions(self) -> list[LocationItem]:
        return [node.item for node in self._regions.values()]

    def list_sub_regions(self, region_key: Optional[str]) -> list[LocationItem]:
        region = self._regions.get(region_key) if region_key else None
        if region is None:
            return []
        return [node.item for node in region.sub_regions.values()]

    def list_settlements(
        self,
        region_key: Optional[str],
        sub_region_key: Optional[str],
    ) -> list[LocationItem]:
        sub_region = self._sub_region(region_key, sub_region_key)
        if sub_region is None:
            return []
        return list(sub_region.settlements.values())

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_label(self, kind: Union[LocationKind, str], keys: KeysLike) -> str:
        """
        Label for the node at `kind`, addressed by its full key path.

        Falls back to the key itself when the node is not in the tree, and
        to an empty string when the path has no key at that level.
        """
        path = _as_mapping(keys)
        try:
            kind = LocationKind(kind)
        except ValueError:
            # Unknown level: echo the most specific key we were given
            return path.get("settlement") or path.get("sub_region") or path.get("region") or ""

        region_key = path.get("region")
        sub_region_key = path.get("sub_region")
        settlement_key = path.get("settlement")

        if kind is LocationKind.REGION:
            node = self._regions.get(region_key) if region_key else None
            return node.item.label if node else (region_key or "")

        if kind is LocationKind.SUB_REGION:
            node = self._sub_region(region_key, sub_region_key)
            return node.item.label if node else (sub_region_key or "")

        sub_region = self._sub_region(region_key, sub_region_key)
        item = sub_region.settlements.get(settlement_key) if sub_region and settlement_key else None
        return item.label if item else (settlement_key or "")

    def resolve_labels(self, path: KeysLike) -> dict[LocationKind, str]:
        """All three labels for a path in one call (missing levels are '')."""
        return {kind: self.resolve_label(kind, path) for kind in LocationKind}

    def find_key(
        self,
        kind: LocationKind,
        value: Optional[str],
        region_key: Optional[str] = None,
        sub_region_key: Optional[str] = None,
    ) -> Optional[str]:
        """
        Map a key OR a label at the given level back to its stable key.

        Returns None if `value` is neither a key nor a label among the
        children of the given parents.
        """
        if not value:
            return None
        value = value.strip()

        if kind is LocationKind.REGION:
            candidates = self.list_regions()
        elif kind is LocationKind.SUB_REGION:
            candidates = self.list_sub_regions(region_key)
        else:
            candidates = self.list_settlements(region_key, sub_region_key)

        for item in candidates:
            if item.key == value:
                return item.key
        for item in candidates:
            if item.label == value:
                return item.key
        return None

    def contains(self, path: KeysLike) -> bool:
        """True if every key given in the path exists under its parents."""
        keys = _as_mapping(path)
        region_key = keys.get("region")
        if not region_key or region_key not in self._regions:
            return False
        sub_region_key = keys.get("sub_region")
        if not sub_region_key:
            return not keys.get("settlement")
        sub_region = self._sub_region(region_key, sub_region_key)
        if sub_region is None:
            return False
        settlement_key = keys.get("settlement")
        return not settlement_key or settlement_key in sub_region.settlements

    def _sub_region(
        self,
        region_key: Optional[str],
        sub_region_key: Optional[str],
    ) -> Optional[_SubRegionNode]:
        if not region_key or not sub_region_key:
            return None
        region = self._regions.get(region_key)
        if region is None:
            return None
        return region.sub_regions.get(sub_region_key)


def _as_mapping(keys: KeysLike) -> Mapping[str, Optional[str]]:
    if isinstance(keys, LocationPath):
        return keys.model_dump()
    # Accept "subRegion" as well as "sub_region"
    return {
        kind.value: keys[kind.value] if kind.value in keys else keys.get(to_camel(kind.value))
        for kind in LocationKind
    }


@lru_cache()
def get_location_hierarchy() -> LocationHierarchy:
    """The process-wide Gujarat hierarchy, built on first use."""
    return LocationHierarchy(GUJARAT_LOCATIONS)
