"""
API Response Models

Shapes the persistence service returns around the domain records:
paging metadata, the auth handshake, and the yearly income summary.
"""

from decimal import Decimal
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from vadi_hisaab.models.base import Money, WireModel


T = TypeVar("T")


class Pagination(WireModel):
    total: int = 0
    page: int = 1
    limit: int = 0
    total_pages: int = 0


class Page(BaseModel, Generic[T]):
    """One page of a list endpoint."""
    items: list[T] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    @property
    def has_more(self) -> bool:
        return self.pagination.page < self.pagination.total_pages


class OtpRequest(WireModel):
    """Reply to a one-time-code request."""
    message: str = ""
    session_id: str


class VerifyResult(WireModel):
    """Reply to code verification. The token is stored by the auth service."""
    token: str
    is_new_user: bool = False
    is_profile_completed: bool = False
    consent_given: bool = False


class IncomeSummaryItem(WireModel):
    category: str = Field(..., alias="_id")
    total_amount: Money = Decimal("0")
    count: int = 0


class IncomeSummary(WireModel):
    """Per-category income totals for one year."""
    year: Optional[int] = None
    summary: list[IncomeSummaryItem] = Field(default_factory=list)
    grand_total: Money = Decimal("0")
