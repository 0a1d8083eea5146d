"""
Derivation Engine

Computes monetary totals from the registry's rules:
- DirectField: the total is a flat cost field (0.00 when blank,
  None when it is not a number)
- Product: quantity factor(s) x rate, only when every factor is > 0

DESIGN DECISION: A product that cannot be computed yet is None, not zero.
The UI shows "not yet computable" differently from "computed as zero".

Negative input is NOT clamped here. The validator rejects it before a
record is ever built; this engine just does arithmetic.
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel

from vadi_hisaab.ledger.numbers import is_blank, round_currency, to_decimal
from vadi_hisaab.ledger.schema import (
    CategorySchema,
    CategorySchemaRegistry,
    DirectField,
    Product,
    UnknownCategoryError,
    get_registry,
)


class DerivationEngine:
    """Fills in and reads derived money fields, per category rules."""

    def __init__(self, registry: Optional[CategorySchemaRegistry] = None):
        self._registry = registry or get_registry()

    def _schema(self, category, fields: Mapping[str, Any], mode) -> CategorySchema:
        if self._registry.entry(category) is None:
            raise UnknownCategoryError(category)
        if mode is None:
            mode = fields.get("mode")
        return self._registry.schema_for(category, mode)

    def compute_total(
        self,
        category,
        fields: Mapping[str, Any],
        mode=None,
    ) -> Optional[Decimal]:
        """
        Monetary total of a draft, rounded to 2 places.

        Returns None for categories without a total, for a flat cost that
        is not a number and for products whose factors are missing or not
        positive.
        """
        schema = self._schema(category, fields, mode)
        return self._total(schema, fields)

    def compute_unit_rate(
        self,
        category,
        fields: Mapping[str, Any],
        mode=None,
    ) -> Optional[Decimal]:
        """
        Per-unit rate (e.g. seed cost per kg), rounded to 2 places.

        None when the category has no unit rate or the quantity is not > 0.
        """
        schema = self._schema(category, fields, mode)
        rule = schema.unit_rate_rule
        if rule is None:
            return None
        total = to_decimal(schema.value_of(fields, rule.total_field))
        quantity = to_decimal(schema.value_of(fields, rule.quantity_field))
        if total is None or quantity is None or quantity <= 0:
            return None
        return round_currency(total / quantity)

    def derive(self, payload: BaseModel) -> BaseModel:
        """
        Copy of a typed payload with its derived fields filled in.

        Payloads without derived fields come back unchanged.
        """
        schema = self._registry.schema_for_payload(payload)
        if schema is None:
            raise TypeError(f"Not a ledger payload: {type(payload).__name__}")

        fields = payload.model_dump()
        updates = {}

        if schema.derived_field:
            updates[schema.derived_field] = self._total(schema, fields)

        rule = schema.unit_rate_rule
        if rule is not None:
            updates[rule.target_field] = self.compute_unit_rate(
                schema.category, fields, schema.mode
            )

        if not updates:
            return payload
        return payload.model_copy(update=updates)

    def amount_of(self, payload: BaseModel) -> Decimal:
        """
        The money a typed payload represents, for totals and summaries.

        Prefers recomputing from the rule; falls back to a stored derived
        value (as returned by the server), then to zero.
        """
        schema = self._registry.schema_for_payload(payload)
        if schema is None:
            raise TypeError(f"Not a ledger payload: {type(payload).__name__}")

        fields = payload.model_dump()
        total = self._total(schema, fields)
        if total is None and schema.derived_field:
            total = to_decimal(fields.get(schema.derived_field))
        return total if total is not None else Decimal("0.00")

    @staticmethod
    def _total(schema: CategorySchema, fields: Mapping[str, Any]) -> Optional[Decimal]:
        rule = schema.total_rule

        if isinstance(rule, DirectField):
            raw = schema.value_of(fields, rule.name)
            if is_blank(raw):
                return Decimal("0.00")
            value = to_decimal(raw)
            if value is None:
                return None
            return round_currency(value)

        if isinstance(rule, Product):
            result = Decimal(1)
            for name in rule.factors:
                value = to_decimal(schema.value_of(fields, name))
                if value is None or value <= 0:
                    return None
                result *= value
            return round_currency(result)

        return None
