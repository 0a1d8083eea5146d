"""
Crop Data Models

A crop record is one planting: which crop, in which season and year, on
how much land. Expenses and incomes point at it by id.

DESIGN DECISION: Status moves only through CropLifecycle
(vadi_hisaab.crops.lifecycle). This model stores the current status;
it does not decide which transitions are allowed.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from vadi_hisaab.models.base import Quantity, WireModel


class CropSeason(str, Enum):
    KHARIF = "Kharif"
    RABI = "Rabi"
    SUMMER = "Summer"


class CropStatus(str, Enum):
    ACTIVE = "Active"
    HARVESTED = "Harvested"
    CLOSED = "Closed"


class AreaUnit(str, Enum):
    ACRE = "Acre"
    BIGHA = "Bigha"
    HECTARE = "Hectare"


SEASON_LABELS = {
    CropSeason.KHARIF: "ખરીફ",
    CropSeason.RABI: "રવી",
    CropSeason.SUMMER: "ઉનાળો",
}

STATUS_LABELS = {
    CropStatus.ACTIVE: "સક્રિય",
    CropStatus.HARVESTED: "લણણી",
    CropStatus.CLOSED: "બંધ",
}


class CropRecord(WireModel):
    """
    One planting, as stored by the persistence service.

    `id` is assigned by the server; it is None on a record that has not
    been created yet.
    """
    id: Optional[str] = Field(default=None, alias="_id")
    user_id: Optional[str] = None
    season: CropSeason
    year: int = Field(
        default_factory=lambda: date.today().year,
        ge=2000,
        le=2100,
    )
    crop_name: str = Field(..., min_length=1)
    crop_emoji: Optional[str] = None
    sub_variety: Optional[str] = None
    batch_label: Optional[str] = Field(
        default=None,
        description="Tells two plantings of the same crop apart"
    )
    area: Quantity = Field(..., gt=0)
    area_unit: AreaUnit = AreaUnit.BIGHA
    status: CropStatus = CropStatus.ACTIVE
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("season", "area_unit", "status", mode="before")
    @classmethod
    def match_enum_case(cls, v, info):
        # Forms send "kharif" as readily as "Kharif"
        if isinstance(v, str):
            enum_cls = {
                "season": CropSeason,
                "area_unit": AreaUnit,
                "status": CropStatus,
            }[info.field_name]
            for member in enum_cls:
                if member.value.lower() == v.strip().lower():
                    return member
        return v

    @field_validator("sub_variety", "batch_label", "notes", "crop_emoji")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def display_name(self) -> str:
        """'Cotton (BT) - Plot 2' style name for pickers."""
        name = self.crop_name
        if self.sub_variety:
            name = f"{name} ({self.sub_variety})"
        if self.batch_label:
            name = f"{name} - {self.batch_label}"
        return name

    @property
    def season_label(self) -> str:
        return SEASON_LABELS[self.season]

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]
