"""
Ledger Summaries

Totals for the dashboard and the expense tab, computed from records the
caller already fetched.

DESIGN DECISION: Summaries are DETERMINISTIC sums over stored records.
Every amount comes from DerivationEngine.amount_of(), so a total shown
here always matches the per-record figure shown next to it.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from vadi_hisaab.ledger.numbers import round_currency
from vadi_hisaab.ledger.records import ExpenseRecord, IncomeRecord
from vadi_hisaab.models.crop import CropRecord, CropStatus


class LedgerSummary(BaseModel):
    """Total, count and per-category breakdown of a set of records."""
    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal("0.00")
    count: int = 0
    by_category: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Category wire value -> total, only categories present"
    )


class CropBalance(BaseModel):
    """Money in and out for one crop."""
    model_config = ConfigDict(frozen=True)

    crop_id: str
    income: Decimal
    expense: Decimal

    @property
    def profit(self) -> Decimal:
        """Negative when the crop has cost more than it earned."""
        return self.income - self.expense


def _summarize(records) -> LedgerSummary:
    total = Decimal("0")
    count = 0
    by_category: dict[str, Decimal] = {}

    for record in records:
        amount = record.amount
        total += amount
        count += 1
        key = record.category.value
        by_category[key] = by_category.get(key, Decimal("0")) + amount

    return LedgerSummary(
        total=round_currency(total),
        count=count,
        by_category={k: round_currency(v) for k, v in by_category.items()},
    )


def summarize_expenses(records: Iterable[ExpenseRecord]) -> LedgerSummary:
    return _summarize(records)


def summarize_incomes(records: Iterable[IncomeRecord]) -> LedgerSummary:
    return _summarize(records)


def crop_balance(
    crop_id: str,
    expenses: Iterable[ExpenseRecord],
    incomes: Iterable[IncomeRecord],
) -> CropBalance:
    """
    Income and expense of one crop.

    Records belonging to other crops are ignored, so the caller may pass
    unfiltered lists.
    """
    expense = sum(
        (r.amount for r in expenses if r.crop_id == crop_id), Decimal("0")
    )
    income = sum(
        (r.amount for r in incomes if r.crop_id == crop_id), Decimal("0")
    )
    return CropBalance(
        crop_id=crop_id,
        income=round_currency(income),
        expense=round_currency(expense),
    )


def crop_status_counts(
    crops: Iterable[CropRecord],
    season: Optional[str] = None,
) -> dict[CropStatus, int]:
    """Number of crops per status; every status is present, even at 0."""
    counts = {status: 0 for status in CropStatus}
    for crop in crops:
        if season is not None and crop.season.value != season:
            continue
        counts[crop.status] += 1
    return counts
