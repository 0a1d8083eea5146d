"""
Ledger Records

A record is the envelope (id, owning crop, category tag, date, notes,
timestamps) plus EXACTLY ONE category payload.

DESIGN DECISION: In Python the payload is a single typed field. On the
wire it sits under its own key ("seed", "labourDaily", "cropSale", ...),
as the persistence service expects. to_wire()/from_wire() translate
between the two and refuse documents with no payload or several.
"""

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from vadi_hisaab.ledger.derivation import DerivationEngine
from vadi_hisaab.ledger.schema import CategorySchema, get_registry
from vadi_hisaab.models.base import WireModel
from vadi_hisaab.models.ledger import (
    CATEGORY_LABELS,
    ExpenseCategory,
    ExpensePayload,
    IncomeCategory,
    IncomePayload,
    LabourMode,
    parse_category,
)


# Product totals are rounded to the paisa, stored ones may be too
TOTAL_TOLERANCE = Decimal("0.01")

_engine = DerivationEngine()


class RecordShapeError(ValueError):
    """A wire document does not carry exactly one known payload."""


class _LedgerRecord(WireModel):
    """Envelope shared by expenses and incomes."""
    id: Optional[str] = Field(default=None, alias="_id")
    user_id: Optional[str] = Field(default=None, description="Owning farmer's profile id")
    date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("category", mode="before", check_fields=False)
    @classmethod
    def parse_tag(cls, v: Any) -> Any:
        parsed = parse_category(v)
        return parsed if parsed is not None else v

    @field_validator("crop_id", mode="before", check_fields=False)
    @classmethod
    def unwrap_crop(cls, v: Any) -> Any:
        # Income lists come back with the crop populated
        if isinstance(v, Mapping):
            return v.get("_id") or v.get("id")
        return v

    @field_validator("notes")
    @classmethod
    def blank_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_payload(self):
        schema = get_registry().schema_for_payload(self.payload)
        if schema is None or schema.category != self.category:
            raise ValueError(
                f"{type(self.payload).__name__} does not belong to "
                f"category {self.category.value!r}"
            )
        self._check_derived_total(schema)
        return self

    def _check_derived_total(self, schema: CategorySchema) -> None:
        if not schema.derived_field:
            return
        stored = getattr(self.payload, schema.derived_field)
        if stored is None:
            return
        computed = _engine.compute_total(
            schema.category, self.payload.model_dump(), schema.mode
        )
        if computed is not None and abs(computed - stored) > TOTAL_TOLERANCE:
            raise ValueError(
                f"{schema.derived_field} is {stored} but the entered "
                f"figures give {computed}"
            )

    # -------------------------------------------------------------------------

    @property
    def category_schema(self) -> CategorySchema:
        return get_registry().schema_for_payload(self.payload)

    @property
    def mode(self) -> Optional[LabourMode]:
        return self.category_schema.mode

    @property
    def amount(self) -> Decimal:
        """Money this record represents."""
        return _engine.amount_of(self.payload)

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS[self.category]

    def to_wire(self) -> dict:
        """Envelope plus the payload under its own wire key."""
        data = self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"payload"}
        )
        data[self.category_schema.payload_key] = self.payload.to_wire()
        return data

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]):
        """
        Parse a server document.

        Raises:
            RecordShapeError: No payload key, or more than one
            pydantic.ValidationError: Fields fail their constraints
        """
        registry = get_registry()
        present = [
            key for key in registry.payload_keys()
            if data.get(key) is not None
        ]
        if not present:
            raise RecordShapeError("Record carries no category payload")
        if len(present) > 1:
            raise RecordShapeError(
                f"Record carries more than one payload: {sorted(present)}"
            )

        key = present[0]
        schema = registry.schema_for_key(key)
        envelope = {k: v for k, v in data.items() if k != key}
        envelope["payload"] = schema.payload_model.model_validate(data[key])
        return cls.model_validate(envelope)


class ExpenseRecord(_LedgerRecord):
    """One farm expense. Always belongs to a crop."""
    crop_id: str = Field(..., min_length=1)
    category: ExpenseCategory
    payload: ExpensePayload


class IncomeRecord(_LedgerRecord):
    """One farm income. May reference a crop."""
    crop_id: Optional[str] = None
    category: IncomeCategory
    payload: IncomePayload
