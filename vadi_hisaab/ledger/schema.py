"""
Category Schema Registry

The single source of truth for per-category rules. For every ledger
category it declares:
- which fields exist, which are required, which are numeric
- how the monetary total is derived (none, a direct field, or a product)
- which payload model carries the data and under which wire key

DESIGN DECISION: No category-specific logic lives anywhere else. The
validator, the derivation engine and the record factory all read from
this table, so adding a category means one new entry plus one payload
model.

Labour is the only category with two shapes (daily wage vs contract
advance). Its entry holds one variant per LabourMode.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from vadi_hisaab.models.ledger import (
    ADVANCE_REASONS,
    ASSET_TYPES,
    FERTILIZER_PRODUCTS,
    LABOUR_TASKS,
    MACHINERY_IMPLEMENTS,
    OTHER_INCOME_SOURCES,
    PESTICIDE_CATEGORIES,
    SCHEME_TYPES,
    SEED_TYPES,
    CropSalePayload,
    ExpenseCategory,
    FertilizerPayload,
    IncomeCategory,
    LabourContractPayload,
    LabourDailyPayload,
    LabourMode,
    LedgerCategory,
    MachineryPayload,
    OtherIncomePayload,
    PesticidePayload,
    RentalIncomePayload,
    SeedPayload,
    SubsidyPayload,
    parse_category,
    parse_labour_mode,
)


ENVELOPE_FIELDS = frozenset({
    "id", "_id", "category", "mode", "notes", "date",
    "crop_id", "cropId", "created_at", "createdAt",
})


class UnknownCategoryError(KeyError):
    """Raised by schema_for() for a tag outside the closed category set."""

    def __init__(self, category):
        self.category = category
        super().__init__(f"Unknown ledger category: {category!r}")


class FieldKind(str, Enum):
    """What a field holds, which decides how it is checked."""
    TEXT = "text"          # free text or a picker value
    AMOUNT = "amount"      # money, must be > 0 when required
    QUANTITY = "quantity"  # count/weight/duration, must be > 0 when required
    FLAG = "flag"          # boolean switch, never required

    @property
    def is_numeric(self) -> bool:
        return self in (FieldKind.AMOUNT, FieldKind.QUANTITY)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind
    required: bool = True
    options: tuple[str, ...] = ()


# -----------------------------------------------------------------------------
# Total derivation rules
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NoTotal:
    """The category has no monetary total to derive."""


@dataclass(frozen=True)
class DirectField:
    """The total is entered directly in one field."""
    name: str


@dataclass(frozen=True)
class Product:
    """The total is quantity field(s) multiplied by a rate field."""
    quantity_fields: tuple[str, ...]
    rate_field: str

    @property
    def factors(self) -> tuple[str, ...]:
        return (*self.quantity_fields, self.rate_field)


@dataclass(frozen=True)
class UnitRate:
    """A per-unit rate derived as total / quantity (e.g. seed cost per kg)."""
    total_field: str
    quantity_field: str
    target_field: str


TotalRule = Union[NoTotal, DirectField, Product]


@dataclass(frozen=True)
class CategorySchema:
    category: LedgerCategory
    payload_model: type[BaseModel]
    payload_key: str
    fields: tuple[FieldSpec, ...]
    total_rule: TotalRule = NoTotal()
    # Where the derived total is written on the payload (None: not stored)
    derived_field: Optional[str] = None
    unit_rate_rule: Optional[UnitRate] = None
    mode: Optional[LabourMode] = None
    aliases: dict[str, str] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Wire (camelCase) name for every declared field
        model_fields = self.payload_model.model_fields
        aliases = {
            spec.name: (model_fields[spec.name].alias or to_camel(spec.name))
            for spec in self.fields
        }
        object.__setattr__(self, "aliases", aliases)

    @property
    def required_fields(self) -> frozenset[str]:
        return frozenset(spec.name for spec in self.fields if spec.required)

    @property
    def numeric_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.kind.is_numeric)

    def field_spec(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def value_of(self, fields: Mapping[str, Any], name: str) -> Any:
        """
        Read a field from a draft by its Python name or its wire alias.

        UI drafts come in either spelling ("total_cost" or "totalCost").
        """
        if name in fields:
            return fields[name]
        alias = self.aliases.get(name)
        # A flat draft also carries the envelope, so "category" there is the
        # record tag and never the pesticide class
        if alias is not None and alias not in ENVELOPE_FIELDS and alias in fields:
            return fields[alias]
        return None


@dataclass(frozen=True)
class CategoryEntry:
    """
    One registry row. `variants` has a single None key for plain
    categories and one key per LabourMode for Labour.
    """
    category: LedgerCategory
    variants: dict[Optional[LabourMode], CategorySchema]

    @property
    def has_modes(self) -> bool:
        return None not in self.variants


def _text(name: str, options=(), required: bool = True) -> FieldSpec:
    return FieldSpec(name, FieldKind.TEXT, required, tuple(options))


def _amount(name: str, required: bool = True) -> FieldSpec:
    return FieldSpec(name, FieldKind.AMOUNT, required)


def _quantity(name: str, required: bool = True) -> FieldSpec:
    return FieldSpec(name, FieldKind.QUANTITY, required)


def _single(schema: CategorySchema) -> CategoryEntry:
    return CategoryEntry(category=schema.category, variants={None: schema})


# =============================================================================
# THE TABLE
# =============================================================================

_ENTRIES: tuple[CategoryEntry, ...] = (
    # ---- Expenses -----------------------------------------------------------
    _single(CategorySchema(
        category=ExpenseCategory.SEED,
        payload_model=SeedPayload,
        payload_key="seed",
        fields=(
            _text("seed_type", SEED_TYPES),
            _quantity("quantity_kg", required=False),
            _amount("total_cost"),
        ),
        total_rule=DirectField("total_cost"),
        unit_rate_rule=UnitRate(
            total_field="total_cost",
            quantity_field="quantity_kg",
            target_field="rate_per_kg",
        ),
    )),
    _single(CategorySchema(
        category=ExpenseCategory.FERTILIZER,
        payload_model=FertilizerPayload,
        payload_key="fertilizer",
        fields=(
            _text("product_name", FERTILIZER_PRODUCTS),
            _quantity("number_of_bags", required=False),
            _amount("total_cost"),
        ),
        total_rule=DirectField("total_cost"),
    )),
    _single(CategorySchema(
        category=ExpenseCategory.PESTICIDE,
        payload_model=PesticidePayload,
        payload_key="pesticide",
        fields=(
            _text("pesticide_category", PESTICIDE_CATEGORIES),
            _quantity("dosage_ml", required=False),
            _amount("cost"),
        ),
        total_rule=DirectField("cost"),
    )),
    CategoryEntry(
        category=ExpenseCategory.LABOUR,
        variants={
            LabourMode.DAILY: CategorySchema(
                category=ExpenseCategory.LABOUR,
                mode=LabourMode.DAILY,
                payload_model=LabourDailyPayload,
                payload_key="labourDaily",
                fields=(
                    _text("task", LABOUR_TASKS),
                    _quantity("number_of_people"),
                    _quantity("days"),
                    _amount("daily_rate"),
                ),
                total_rule=Product(("number_of_people", "days"), "daily_rate"),
                derived_field="total_cost",
            ),
            LabourMode.CONTRACT: CategorySchema(
                category=ExpenseCategory.LABOUR,
                mode=LabourMode.CONTRACT,
                payload_model=LabourContractPayload,
                payload_key="labourContract",
                fields=(
                    _text("advance_reason", ADVANCE_REASONS),
                    _amount("amount_given"),
                ),
                total_rule=DirectField("amount_given"),
            ),
        },
    ),
    _single(CategorySchema(
        category=ExpenseCategory.MACHINERY,
        payload_model=MachineryPayload,
        payload_key="machinery",
        fields=(
            _text("implement", MACHINERY_IMPLEMENTS),
            FieldSpec("is_contract", FieldKind.FLAG, required=False),
            _quantity("hours_or_acres"),
            _amount("rate"),
        ),
        total_rule=Product(("hours_or_acres",), "rate"),
        derived_field="total_cost",
    )),
    # ---- Incomes ------------------------------------------------------------
    _single(CategorySchema(
        category=IncomeCategory.CROP_SALE,
        payload_model=CropSalePayload,
        payload_key="cropSale",
        fields=(
            _text("crop_name", required=False),
            _quantity("quantity_kg"),
            _amount("price_per_kg"),
            _text("buyer_name", required=False),
            _text("market_name", required=False),
        ),
        total_rule=Product(("quantity_kg",), "price_per_kg"),
        derived_field="total_amount",
    )),
    _single(CategorySchema(
        category=IncomeCategory.SUBSIDY,
        payload_model=SubsidyPayload,
        payload_key="subsidy",
        fields=(
            _text("scheme_type", SCHEME_TYPES),
            _amount("amount"),
            _text("reference_number", required=False),
        ),
        total_rule=DirectField("amount"),
    )),
    _single(CategorySchema(
        category=IncomeCategory.RENTAL_INCOME,
        payload_model=RentalIncomePayload,
        payload_key="rentalIncome",
        fields=(
            _text("asset_type", ASSET_TYPES),
            _text("rented_to_name", required=False),
            _quantity("hours_or_days"),
            _amount("rate_per_unit"),
        ),
        total_rule=Product(("hours_or_days",), "rate_per_unit"),
        derived_field="total_amount",
    )),
    _single(CategorySchema(
        category=IncomeCategory.OTHER,
        payload_model=OtherIncomePayload,
        payload_key="otherIncome",
        fields=(
            _text("source", OTHER_INCOME_SOURCES),
            _amount("amount"),
            _text("description", required=False),
        ),
        total_rule=DirectField("amount"),
    )),
)


class CategorySchemaRegistry:
    """
    Read-only lookup from category tag to its schema.

    Built once at process start; safe to share between any number of
    readers.
    """

    def __init__(self, entries=_ENTRIES):
        self._entries: dict[LedgerCategory, CategoryEntry] = {
            entry.category: entry for entry in entries
        }
        self._by_payload: dict[type[BaseModel], CategorySchema] = {
            schema.payload_model: schema
            for entry in entries
            for schema in entry.variants.values()
        }

    @property
    def categories(self) -> tuple[LedgerCategory, ...]:
        return tuple(self._entries)

    def entry(self, category) -> Optional[CategoryEntry]:
        parsed = parse_category(category)
        return self._entries.get(parsed) if parsed is not None else None

    def get(self, category, mode=None) -> Optional[CategorySchema]:
        """Schema for a category, or None if the tag (or mode) is unknown."""
        entry = self.entry(category)
        if entry is None:
            return None
        if not entry.has_modes:
            return entry.variants[None]
        parsed_mode = parse_labour_mode(mode)
        if parsed_mode is None:
            return None
        return entry.variants.get(parsed_mode)

    def schema_for(self, category, mode=None) -> CategorySchema:
        """Schema for a category; raises UnknownCategoryError if unknown."""
        entry = self.entry(category)
        if entry is None:
            raise UnknownCategoryError(category)
        schema = self.get(category, mode)
        if schema is None:
            raise ValueError(f"Unknown labour mode: {mode!r}")
        return schema

    def schemas_for(self, category) -> tuple[CategorySchema, ...]:
        """Every variant of a category (two for Labour, one otherwise)."""
        entry = self.entry(category)
        if entry is None:
            raise UnknownCategoryError(category)
        return tuple(entry.variants.values())

    def schema_for_payload(self, payload: BaseModel) -> Optional[CategorySchema]:
        """The schema whose payload model produced this payload."""
        return self._by_payload.get(type(payload))

    def schema_for_key(self, payload_key: str) -> Optional[CategorySchema]:
        """The schema whose payload sits under this wire key."""
        for schema in self._by_payload.values():
            if schema.payload_key == payload_key:
                return schema
        return None

    def payload_keys(self) -> frozenset[str]:
        """Every wire key a payload can sit under."""
        return frozenset(schema.payload_key for schema in self._by_payload.values())


_default_registry = CategorySchemaRegistry()


def get_registry() -> CategorySchemaRegistry:
    """The process-wide registry."""
    return _default_registry
