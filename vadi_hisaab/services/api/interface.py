"""
Abstract Persistence Interfaces

DESIGN DECISION: The core never talks HTTP directly. Flows depend on these
interfaces, which allows us to:
1. Swap the REST backend without touching business logic
2. Use in-memory fakes for testing the flows

Every remote call is a one-shot round trip: it fully succeeds or raises
one of the ApiError subclasses below. Nothing is retried automatically;
a failed call leaves the caller's draft untouched for a manual retry.
"""

from abc import ABC, abstractmethod
from typing import Optional

from vadi_hisaab.ledger.records import ExpenseRecord, IncomeRecord
from vadi_hisaab.models.api import IncomeSummary, OtpRequest, Page, VerifyResult
from vadi_hisaab.models.crop import CropRecord, CropSeason, CropStatus
from vadi_hisaab.models.ledger import ExpenseCategory, IncomeCategory
from vadi_hisaab.models.profile import FarmerProfile


# =============================================================================
# ERRORS
# =============================================================================

class ApiError(Exception):
    """Base exception for persistence calls. str() is shown to the farmer."""
    pass


class TransportError(ApiError):
    """The request never got a response."""
    default_message = "Network error. Check your internet connection."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ConnectionRefusedApiError(TransportError):
    default_message = "Connection refused. Check the server is running and the port is correct."


class HostUnreachableError(TransportError):
    default_message = "Cannot reach server. Check the server address."


class RequestTimeoutError(TransportError):
    default_message = "Request timed out. The server took too long to respond."


class NetworkError(TransportError):
    pass


class ServerError(ApiError):
    """The server answered with a non-success status."""

    GENERIC_MESSAGE = "Something went wrong"

    def __init__(self, message: Optional[str], status_code: int):
        self.status_code = status_code
        super().__init__(message or self.GENERIC_MESSAGE)


class NotFoundError(ServerError):
    """The entity does not exist (HTTP 404)."""
    pass


# =============================================================================
# INTERFACES
# =============================================================================

class AuthInterface(ABC):
    """Phone + one-time-code sign in."""

    @abstractmethod
    async def send_otp(self, phone: str) -> OtpRequest:
        pass

    @abstractmethod
    async def verify_otp(self, phone: str, otp: str, session_id: str) -> VerifyResult:
        """
        Exchange the code for a session token.

        The token is stored and attached to every later call.
        """
        pass

    @abstractmethod
    async def save_consent(self, consent: bool) -> bool:
        pass

    @abstractmethod
    async def logout(self) -> None:
        """Forget the session token."""
        pass

    @property
    @abstractmethod
    def is_signed_in(self) -> bool:
        pass


class CropStorageInterface(ABC):

    @abstractmethod
    async def create(self, crop: CropRecord) -> CropRecord:
        pass

    @abstractmethod
    async def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        season: Optional[CropSeason] = None,
        status: Optional[CropStatus] = None,
    ) -> Page[CropRecord]:
        pass

    @abstractmethod
    async def get(self, crop_id: str) -> CropRecord:
        """
        Raises:
            NotFoundError: No crop with this id
        """
        pass

    @abstractmethod
    async def update(self, crop_id: str, changes: dict) -> CropRecord:
        pass

    @abstractmethod
    async def update_status(self, crop_id: str, status: CropStatus) -> CropRecord:
        pass

    @abstractmethod
    async def delete(self, crop_id: str) -> None:
        """Delete the crop only. Its ledger records are left as they are."""
        pass


class ExpenseStorageInterface(ABC):

    @abstractmethod
    async def create(self, expense: ExpenseRecord) -> ExpenseRecord:
        pass

    @abstractmethod
    async def list(
        self,
        crop_id: Optional[str] = None,
        category: Optional[ExpenseCategory] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[ExpenseRecord]:
        pass

    @abstractmethod
    async def get(self, expense_id: str) -> ExpenseRecord:
        pass

    @abstractmethod
    async def delete(self, expense_id: str) -> None:
        pass


class IncomeStorageInterface(ABC):

    @abstractmethod
    async def create(self, income: IncomeRecord) -> IncomeRecord:
        pass

    @abstractmethod
    async def get(self, income_id: str) -> IncomeRecord:
        pass

    @abstractmethod
    async def update(self, income_id: str, income: IncomeRecord) -> IncomeRecord:
        pass

    @abstractmethod
    async def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        crop_id: Optional[str] = None,
        category: Optional[IncomeCategory] = None,
        year: Optional[int] = None,
    ) -> Page[IncomeRecord]:
        pass

    @abstractmethod
    async def summary(self, year: Optional[int] = None) -> IncomeSummary:
        pass

    @abstractmethod
    async def delete(self, income_id: str) -> None:
        pass


class ProfileStorageInterface(ABC):

    @abstractmethod
    async def get_mine(self) -> FarmerProfile:
        """
        Raises:
            NotFoundError: Profile not completed yet
        """
        pass

    @abstractmethod
    async def complete(self, payload: dict) -> FarmerProfile:
        """Create the profile. Allowed once per account."""
        pass

    @abstractmethod
    async def update(self, payload: dict) -> FarmerProfile:
        pass
