"""Draft validation for ledger, crop and profile entries."""

from vadi_hisaab.validation.validator import (
    DraftValidationError,
    TransactionValidator,
)

__all__ = [
    "DraftValidationError",
    "TransactionValidator",
]
