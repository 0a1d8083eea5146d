"""Ledger core: category registry, derivation, records and summaries."""

from vadi_hisaab.ledger.derivation import DerivationEngine
from vadi_hisaab.ledger.factory import LedgerRecordFactory
from vadi_hisaab.ledger.records import (
    ExpenseRecord,
    IncomeRecord,
    RecordShapeError,
)
from vadi_hisaab.ledger.schema import (
    CategorySchema,
    CategorySchemaRegistry,
    DirectField,
    NoTotal,
    Product,
    UnknownCategoryError,
    get_registry,
)
from vadi_hisaab.ledger.summary import (
    CropBalance,
    LedgerSummary,
    crop_balance,
    crop_status_counts,
    summarize_expenses,
    summarize_incomes,
)

__all__ = [
    "CategorySchema",
    "CategorySchemaRegistry",
    "CropBalance",
    "DerivationEngine",
    "DirectField",
    "ExpenseRecord",
    "IncomeRecord",
    "LedgerRecordFactory",
    "LedgerSummary",
    "NoTotal",
    "Product",
    "RecordShapeError",
    "UnknownCategoryError",
    "crop_balance",
    "crop_status_counts",
    "get_registry",
    "summarize_expenses",
    "summarize_incomes",
]
