"""
Location Models

A farmer's location is three levels deep: district -> taluka -> village
(region -> sub-region -> settlement in generic terms).

DESIGN DECISION: Every node has a stable English KEY and a localized LABEL.
- Keys are persisted and compared. They never change with the UI language.
- Labels are for rendering only and are always derived from keys.

Nothing in this module knows the actual tree; see vadi_hisaab.locations.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LocationKind(str, Enum):
    """The three administrative levels."""
    REGION = "region"            # district
    SUB_REGION = "sub_region"    # taluka
    SETTLEMENT = "settlement"    # village


class LocationItem(BaseModel):
    """A single pickable node: stable key plus display label."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)


class LocationPath(BaseModel):
    """
    Full key path to a node.

    Trailing levels may be missing: a path with only `region` points at a
    region, one with `region` and `sub_region` at a sub-region.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    region: str
    sub_region: Optional[str] = None
    settlement: Optional[str] = None

    def key_for(self, kind: LocationKind) -> Optional[str]:
        """The key stored at the given level of this path."""
        return {
            LocationKind.REGION: self.region,
            LocationKind.SUB_REGION: self.sub_region,
            LocationKind.SETTLEMENT: self.settlement,
        }[kind]


class LocationSelection(BaseModel):
    """
    What the user has picked so far in a cascading location picker.

    CRITICAL: Changing a parent clears its children. A settlement chosen
    under one sub-region is meaningless under another, so the selection
    never carries it over. Re-selecting the same parent keeps children.
    """
    model_config = ConfigDict(frozen=True)

    region: Optional[str] = None
    sub_region: Optional[str] = None
    settlement: Optional[str] = None

    def with_region(self, key: Optional[str]) -> "LocationSelection":
        if key == self.region:
            return self
        return LocationSelection(region=key)

    def with_sub_region(self, key: Optional[str]) -> "LocationSelection":
        if key == self.sub_region:
            return self
        return LocationSelection(region=self.region, sub_region=key)

    def with_settlement(self, key: Optional[str]) -> "LocationSelection":
        return self.model_copy(update={"settlement": key})

    @property
    def is_complete(self) -> bool:
        return bool(self.region and self.sub_region and self.settlement)

    def to_path(self) -> Optional[LocationPath]:
        """The selection as a key path, or None if no region is chosen."""
        if not self.region:
            return None
        return LocationPath(
            region=self.region,
            sub_region=self.sub_region,
            settlement=self.settlement,
        )
