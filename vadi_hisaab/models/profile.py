"""
Farmer Profile Models

The profile stores location as KEYS (e.g. "Rajkot", "Gondal"); screens
show Gujarati labels. ProfileLocationMapper (vadi_hisaab.profile.mapper)
converts between the two.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vadi_hisaab.models.base import Quantity, WireModel


class LandUnit(str, Enum):
    ACRE = "acre"
    BIGHA = "bigha"


class WaterSource(str, Enum):
    RAIN = "Rain"
    BOREWELL = "Borewell"
    CANAL = "Canal"


class LabourType(str, Enum):
    FAMILY = "Family"
    HIRED = "Hired"
    MIXED = "Mixed"


LAND_UNIT_LABELS = {
    LandUnit.ACRE: "એકર",
    LandUnit.BIGHA: "વીઘા",
}

WATER_SOURCE_LABELS = {
    WaterSource.RAIN: "🌧 વરસાદ",
    WaterSource.BOREWELL: "⛽ બોરવેલ",
    WaterSource.CANAL: "💧 નહેર",
}

LABOUR_TYPE_LABELS = {
    LabourType.FAMILY: "👨‍👩‍👧 પારિવારિક",
    LabourType.HIRED: "👷 ભાડે",
    LabourType.MIXED: "🤝 મિશ્ર",
}


class TotalLand(WireModel):
    value: Quantity = Field(..., gt=0)
    unit: LandUnit = LandUnit.BIGHA

    def label(self) -> str:
        return f"{self.value} {LAND_UNIT_LABELS[self.unit]}"


class FarmerProfile(WireModel):
    """Farmer profile with location held as storage keys."""
    id: Optional[str] = Field(default=None, alias="_id")
    name: str = Field(..., min_length=1)
    district: str = Field(..., min_length=1)
    taluka: str = Field(..., min_length=1)
    village: str = Field(..., min_length=1)
    total_land: TotalLand
    water_source: WaterSource
    tractor_available: bool = False
    labour_type: LabourType
    analytics_consent: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileDisplay(BaseModel):
    """
    A profile as the profile screen shows it: location as Gujarati labels.

    Produced by ProfileLocationMapper.to_display(); never sent to the server.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    district: str
    taluka: str
    village: str
    total_land: str
    water_source: str
    tractor_available: bool
    labour_type: str
