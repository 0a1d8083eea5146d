"""
Ledger Record Factory

Turns a validated draft (raw form values) into a typed record:

    draft --registry--> payload model --derivation--> filled payload
          --envelope--> ExpenseRecord / IncomeRecord

DESIGN DECISION: The factory has no per-category branches. It walks the
schema's field list, so a new category needs only its registry entry and
its payload model.

Drafts are expected to have passed TransactionValidator first. Anything
the validator would have rejected surfaces here as pydantic's
ValidationError.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from vadi_hisaab.ledger.derivation import DerivationEngine
from vadi_hisaab.ledger.numbers import is_blank, to_decimal
from vadi_hisaab.ledger.records import ExpenseRecord, IncomeRecord
from vadi_hisaab.ledger.schema import (
    CategorySchema,
    CategorySchemaRegistry,
    FieldKind,
    get_registry,
)


_TRUE_STRINGS = frozenset({"true", "yes", "1", "on"})


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


class LedgerRecordFactory:
    """Builds typed payloads and records from drafts."""

    def __init__(
        self,
        registry: Optional[CategorySchemaRegistry] = None,
        engine: Optional[DerivationEngine] = None,
    ):
        self._registry = registry or get_registry()
        self._engine = engine or DerivationEngine(self._registry)

    def build_payload(
        self,
        category,
        fields: Mapping[str, Any],
        mode=None,
    ) -> BaseModel:
        """
        Typed payload for a draft, with derived fields filled in.

        Raises:
            UnknownCategoryError: Category tag is not known
            ValueError: Labour mode is not known
        """
        if mode is None:
            mode = fields.get("mode")
        schema = self._registry.schema_for(category, mode)
        values = self._collect(schema, fields)
        payload = schema.payload_model.model_validate(values)
        return self._engine.derive(payload)

    @staticmethod
    def _collect(schema: CategorySchema, fields: Mapping[str, Any]) -> dict:
        values = {}
        for spec in schema.fields:
            raw = schema.value_of(fields, spec.name)
            if spec.kind is FieldKind.FLAG:
                values[spec.name] = _as_flag(raw)
            elif is_blank(raw):
                continue
            elif spec.kind.is_numeric:
                number = to_decimal(raw)
                # Let the model report unparseable input
                values[spec.name] = number if number is not None else raw
            else:
                values[spec.name] = raw if isinstance(raw, str) else str(raw)
        return values

    def build_expense(
        self,
        crop_id: str,
        category,
        fields: Mapping[str, Any],
        mode=None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> ExpenseRecord:
        payload = self.build_payload(category, fields, mode)
        return ExpenseRecord(
            crop_id=crop_id,
            category=category,
            payload=payload,
            notes=notes if notes is not None else fields.get("notes"),
            date=date,
            user_id=user_id,
        )

    def build_income(
        self,
        category,
        fields: Mapping[str, Any],
        crop_id: Optional[str] = None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        user_id: Optional[str] = None,
    ) -> IncomeRecord:
        payload = self.build_payload(category, fields)
        return IncomeRecord(
            crop_id=crop_id or None,
            category=category,
            payload=payload,
            notes=notes if notes is not None else fields.get("notes"),
            date=date,
            user_id=user_id,
        )
