"""
Validation Models

A draft is checked before anything is sent to the server. The validator
reports the FIRST problem it finds, not a list: the form shows one
message per attempt and re-checks on every submit.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidationErrorKind(str, Enum):
    """Why a draft was rejected."""
    UNKNOWN_CATEGORY = "unknown_category"
    MISSING_FIELD = "missing_field"
    INVALID_AMOUNT = "invalid_amount"
    INVALID_CHOICE = "invalid_choice"


class ValidationIssue(BaseModel):
    """The single problem that blocks a draft from being submitted."""
    model_config = ConfigDict(frozen=True)

    kind: ValidationErrorKind
    field: Optional[str] = Field(
        default=None,
        description="Field with the issue (None for record-level issues)"
    )
    message: str = Field(
        ...,
        description="Human-readable description, shown to the farmer as-is"
    )

    @classmethod
    def unknown_category(cls, category) -> "ValidationIssue":
        return cls(
            kind=ValidationErrorKind.UNKNOWN_CATEGORY,
            field="category",
            message=f"Please choose a valid category (got '{category}')",
        )

    @classmethod
    def missing_field(cls, field: str) -> "ValidationIssue":
        return cls(
            kind=ValidationErrorKind.MISSING_FIELD,
            field=field,
            message=f"{_readable(field)} is required",
        )

    @classmethod
    def invalid_amount(cls, field: str) -> "ValidationIssue":
        return cls(
            kind=ValidationErrorKind.INVALID_AMOUNT,
            field=field,
            message=f"{_readable(field)} must be a number greater than 0",
        )

    @classmethod
    def invalid_choice(cls, field: str, value) -> "ValidationIssue":
        return cls(
            kind=ValidationErrorKind.INVALID_CHOICE,
            field=field,
            message=f"'{value}' is not a valid {_readable(field).lower()}",
        )


def _readable(field: str) -> str:
    return field.replace("_", " ").capitalize()
