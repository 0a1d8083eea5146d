"""
Profile Location Mapper

Converts a profile between its stored form (stable English keys) and its
displayed form (Gujarati labels).

DESIGN DECISION: What goes to the server is ALWAYS keys. to_storage()
accepts either a key or a label for every keyed field, because edit
screens may hand back whatever they displayed, and resolves it to a key
or refuses it. Persisted data therefore never depends on the UI language.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic.alias_generators import to_camel

from vadi_hisaab.ledger.numbers import is_blank, to_decimal
from vadi_hisaab.locations import LocationHierarchy, get_location_hierarchy
from vadi_hisaab.models.location import LocationKind, LocationPath
from vadi_hisaab.models.profile import (
    LABOUR_TYPE_LABELS,
    LAND_UNIT_LABELS,
    WATER_SOURCE_LABELS,
    FarmerProfile,
    LabourType,
    LandUnit,
    ProfileDisplay,
    TotalLand,
    WaterSource,
)


class ProfileMappingError(ValueError):
    """A draft value cannot be mapped to its stored form."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Unknown {field.replace('_', ' ')}: {value!r}")


def _flat_key(enum_cls, labels: Mapping, value: Any):
    """Enum member for a stored value or a display label."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    for member in enum_cls:
        if member.value.lower() == text.lower():
            return member
    for member, label in labels.items():
        # Labels carry an emoji prefix; accept the bare word too
        if text == label or text == label.split(" ", 1)[-1]:
            return member
    return None


class ProfileLocationMapper:
    """Key <-> label conversion for farmer profiles."""

    def __init__(self, hierarchy: Optional[LocationHierarchy] = None):
        self._hierarchy = hierarchy or get_location_hierarchy()

    def to_display(self, profile: FarmerProfile) -> ProfileDisplay:
        """Labels for every keyed field. Unknown keys show as themselves."""
        labels = self._hierarchy.resolve_labels(LocationPath(
            region=profile.district,
            sub_region=profile.taluka,
            settlement=profile.village,
        ))
        return ProfileDisplay(
            name=profile.name,
            district=labels[LocationKind.REGION],
            taluka=labels[LocationKind.SUB_REGION],
            village=labels[LocationKind.SETTLEMENT],
            total_land=profile.total_land.label(),
            water_source=WATER_SOURCE_LABELS[profile.water_source],
            tractor_available=profile.tractor_available,
            labour_type=LABOUR_TYPE_LABELS[profile.labour_type],
        )

    def to_storage(self, draft: Mapping[str, Any]) -> dict:
        """
        Wire payload (camelCase, keys only) for a profile draft.

        Only fields present in the draft are emitted, so the same call
        serves profile completion and partial updates.

        Raises:
            ProfileMappingError: The name is not text, or a location, water
                source, labour type or land unit matches neither a key nor
                a label
        """
        def read(name: str) -> Any:
            if name in draft:
                return draft[name]
            return draft.get(to_camel(name))

        payload: dict[str, Any] = {}

        name = read("name")
        if not is_blank(name):
            if not isinstance(name, str):
                raise ProfileMappingError("name", name)
            payload["name"] = name.strip()

        payload.update(self._location_keys(
            read("district"), read("taluka"), read("village")
        ))

        land = read("total_land")
        if isinstance(land, Mapping):
            payload["totalLand"] = self._land(land)

        for field, enum_cls, labels in (
            ("water_source", WaterSource, WATER_SOURCE_LABELS),
            ("labour_type", LabourType, LABOUR_TYPE_LABELS),
        ):
            raw = read(field)
            if is_blank(raw):
                continue
            member = _flat_key(enum_cls, labels, raw)
            if member is None:
                raise ProfileMappingError(field, raw)
            payload[to_camel(field)] = member.value

        for flag in ("tractor_available", "analytics_consent"):
            raw = read(flag)
            if isinstance(raw, bool):
                payload[to_camel(flag)] = raw

        return payload

    def _location_keys(self, district, taluka, village) -> dict:
        keys = {}
        if is_blank(district):
            return keys

        region_key = self._hierarchy.find_key(LocationKind.REGION, district)
        if region_key is None:
            raise ProfileMappingError("district", district)
        keys["district"] = region_key

        if is_blank(taluka):
            return keys
        sub_key = self._hierarchy.find_key(
            LocationKind.SUB_REGION, taluka, region_key
        )
        if sub_key is None:
            raise ProfileMappingError("taluka", taluka)
        keys["taluka"] = sub_key

        if is_blank(village):
            return keys
        village_key = self._hierarchy.find_key(
            LocationKind.SETTLEMENT, village, region_key, sub_key
        )
        if village_key is None:
            raise ProfileMappingError("village", village)
        keys["village"] = village_key
        return keys

    @staticmethod
    def _land(land: Mapping[str, Any]) -> dict:
        unit_raw = land.get("unit")
        unit = LandUnit.BIGHA
        if not is_blank(unit_raw):
            unit = _flat_key(LandUnit, LAND_UNIT_LABELS, unit_raw)
            if unit is None:
                raise ProfileMappingError("land_unit", unit_raw)
        value = to_decimal(land.get("value"))
        if value is None:
            raise ProfileMappingError("total_land", land.get("value"))
        return TotalLand(value=value, unit=unit).to_wire()
