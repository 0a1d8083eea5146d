"""
Draft Validation

DESIGN DECISION: Rules run in a fixed order and the FIRST failure wins:

1. CATEGORY   - the tag must be a known category of the record's kind
2. MODE       - for Labour, the mode picks which field set applies
3. PRESENCE   - every required field is present and non-blank
4. AMOUNTS    - every amount/quantity field is a number > 0
                (optional ones may be blank or 0, never negative)

WHY ONE ISSUE AT A TIME:
The entry form shows a single message per submit attempt and re-checks
on the next one, so a list would only ever be read from the top.

IMPORTANT: Validation NEVER fixes a draft. It is a pure function of its
inputs and only reports what is wrong.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic.alias_generators import to_camel

from vadi_hisaab.ledger.numbers import is_blank, to_decimal
from vadi_hisaab.ledger.schema import (
    CategorySchema,
    CategorySchemaRegistry,
    get_registry,
)
from vadi_hisaab.models.crop import CropSeason
from vadi_hisaab.models.profile import LabourType, LandUnit, WaterSource
from vadi_hisaab.models.validation import ValidationIssue


class DraftValidationError(ValueError):
    """Raised by the flows when a draft fails validation."""

    def __init__(self, issue: ValidationIssue):
        self.issue = issue
        super().__init__(issue.message)


def _read(fields: Mapping[str, Any], name: str) -> Any:
    """Draft value under its snake_case or camelCase name."""
    if name in fields:
        return fields[name]
    return fields.get(to_camel(name))


def _enum_value(enum_cls, value) -> Optional[Any]:
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    for member in enum_cls:
        if member.value.lower() == value.strip().lower():
            return member
    return None


class TransactionValidator:
    """
    Checks ledger, crop and profile drafts before anything is submitted.

    All per-category knowledge comes from the CategorySchemaRegistry.
    """

    def __init__(self, registry: Optional[CategorySchemaRegistry] = None):
        self._registry = registry or get_registry()

    # =========================================================================
    # LEDGER DRAFTS
    # =========================================================================

    def validate(
        self,
        category,
        fields: Mapping[str, Any],
        mode=None,
        kind=None,
    ) -> Optional[ValidationIssue]:
        """
        Validate a ledger draft.

        Args:
            category: Category tag (enum member or wire string)
            fields: Raw draft values, snake_case or camelCase keys
            mode: Labour mode; falls back to fields["mode"], blank = Daily
            kind: ExpenseCategory or IncomeCategory. A known tag of the
                  other kind is reported as an unknown category.

        Returns:
            The first issue found, or None when the draft may be submitted
        """
        entry = self._registry.entry(category)
        if entry is None or (kind is not None and not isinstance(entry.category, kind)):
            return ValidationIssue.unknown_category(category)

        if mode is None:
            mode = fields.get("mode")
        schema = self._registry.get(category, mode)
        if schema is None:
            return ValidationIssue.invalid_choice("mode", mode)

        return (
            self._check_presence(schema, fields)
            or self._check_amounts(schema, fields)
        )

    def is_valid(self, category, fields: Mapping[str, Any], mode=None, kind=None) -> bool:
        return self.validate(category, fields, mode, kind) is None

    @staticmethod
    def _check_presence(
        schema: CategorySchema,
        fields: Mapping[str, Any],
    ) -> Optional[ValidationIssue]:
        for spec in schema.fields:
            if spec.required and is_blank(schema.value_of(fields, spec.name)):
                return ValidationIssue.missing_field(spec.name)
        return None

    @staticmethod
    def _check_amounts(
        schema: CategorySchema,
        fields: Mapping[str, Any],
    ) -> Optional[ValidationIssue]:
        for spec in schema.fields:
            if not spec.kind.is_numeric:
                continue
            raw = schema.value_of(fields, spec.name)
            if not spec.required and is_blank(raw):
                continue
            number = to_decimal(raw)
            # Optional counts may be 0; required amounts may not
            floor_ok = number is not None and (
                number > 0 or (number == 0 and not spec.required)
            )
            if not floor_ok:
                return ValidationIssue.invalid_amount(spec.name)
        return None

    # =========================================================================
    # OTHER DRAFTS
    # =========================================================================

    @staticmethod
    def validate_crop_reference(crop_id) -> Optional[ValidationIssue]:
        """Expenses always belong to a crop."""
        if is_blank(crop_id):
            return ValidationIssue.missing_field("crop_id")
        return None

    def validate_crop(self, fields: Mapping[str, Any]) -> Optional[ValidationIssue]:
        """
        Validate a new-crop draft, in the order the crop form asks:
        season, then crop, then area.
        """
        season = _read(fields, "season")
        if is_blank(season):
            return ValidationIssue.missing_field("season")
        if _enum_value(CropSeason, season) is None:
            return ValidationIssue.invalid_choice("season", season)

        if is_blank(_read(fields, "crop_name")) and is_blank(_read(fields, "custom_crop")):
            return ValidationIssue.missing_field("crop_name")

        area = _read(fields, "area")
        if is_blank(area):
            return ValidationIssue.missing_field("area")
        number = to_decimal(area)
        if number is None or number <= 0:
            return ValidationIssue.invalid_amount("area")

        year = _read(fields, "year")
        if not is_blank(year):
            parsed = to_decimal(year)
            if parsed is None or parsed != parsed.to_integral_value() \
                    or not 2000 <= parsed <= 2100:
                return ValidationIssue.invalid_choice("year", year)
        return None

    def validate_profile(self, fields: Mapping[str, Any]) -> Optional[ValidationIssue]:
        """Validate a profile draft (setup or edit)."""
        for name in ("name", "district", "taluka", "village"):
            if is_blank(_read(fields, name)):
                return ValidationIssue.missing_field(name)

        land = _read(fields, "total_land")
        if not isinstance(land, Mapping) or is_blank(land.get("value")):
            return ValidationIssue.missing_field("total_land")
        value = to_decimal(land.get("value"))
        if value is None or value <= 0:
            return ValidationIssue.invalid_amount("total_land")
        unit = land.get("unit")
        if not is_blank(unit) and _enum_value(LandUnit, unit) is None:
            return ValidationIssue.invalid_choice("land_unit", unit)

        for name, enum_cls in (
            ("water_source", WaterSource),
            ("labour_type", LabourType),
        ):
            raw = _read(fields, name)
            if is_blank(raw):
                return ValidationIssue.missing_field(name)
            if _enum_value(enum_cls, raw) is None:
                return ValidationIssue.invalid_choice(name, raw)

        if not isinstance(_read(fields, "tractor_available"), bool):
            return ValidationIssue.missing_field("tractor_available")
        return None
