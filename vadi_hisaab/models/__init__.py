"""
Data Models Package

This package contains all Pydantic models used in Vadi Hisaab.
Everything sent to or read from the persistence service conforms to
these schemas.
"""

from vadi_hisaab.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from vadi_hisaab.models.base import Money, Quantity, WireModel
from vadi_hisaab.models.crop import AreaUnit, CropRecord, CropSeason, CropStatus
from vadi_hisaab.models.ledger import (
    CropSalePayload,
    ExpenseCategory,
    FertilizerPayload,
    IncomeCategory,
    LabourContractPayload,
    LabourDailyPayload,
    LabourMode,
    MachineryPayload,
    OtherIncomePayload,
    PesticidePayload,
    RentalIncomePayload,
    SeedPayload,
    SubsidyPayload,
)
from vadi_hisaab.models.location import (
    LocationItem,
    LocationKind,
    LocationPath,
    LocationSelection,
)
from vadi_hisaab.models.profile import (
    FarmerProfile,
    LabourType,
    LandUnit,
    ProfileDisplay,
    TotalLand,
    WaterSource,
)
from vadi_hisaab.models.validation import ValidationErrorKind, ValidationIssue

__all__ = [
    # Wire base
    "Money",
    "Quantity",
    "WireModel",
    # Ledger models
    "CropSalePayload",
    "ExpenseCategory",
    "FertilizerPayload",
    "IncomeCategory",
    "LabourContractPayload",
    "LabourDailyPayload",
    "LabourMode",
    "MachineryPayload",
    "OtherIncomePayload",
    "PesticidePayload",
    "RentalIncomePayload",
    "SeedPayload",
    "SubsidyPayload",
    # Crop models
    "AreaUnit",
    "CropRecord",
    "CropSeason",
    "CropStatus",
    # Profile and location models
    "FarmerProfile",
    "LabourType",
    "LandUnit",
    "LocationItem",
    "LocationKind",
    "LocationPath",
    "LocationSelection",
    "ProfileDisplay",
    "TotalLand",
    "WaterSource",
    # Validation
    "ValidationErrorKind",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
