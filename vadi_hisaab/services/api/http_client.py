"""
REST Persistence Client

DESIGN DECISION: One shared ApiClient owns the httpx.AsyncClient, the
bearer token and the error mapping. The per-resource services only know
paths and shapes.

Every failure is normalized into ONE message the farmer can read:
- no response at all -> a TransportError subclass, by cause
  (refused / unreachable / timed out / anything else)
- a non-2xx response -> ServerError with the body's "message", else its
  "error", else a generic text

No retries. A failed call raises and the caller decides what to do.
"""

import errno
import socket
from collections.abc import Iterator
from typing import Any, Optional

import httpx
import structlog

from vadi_hisaab.config import get_settings
from vadi_hisaab.ledger.records import ExpenseRecord, IncomeRecord
from vadi_hisaab.models.api import (
    IncomeSummary,
    OtpRequest,
    Page,
    Pagination,
    VerifyResult,
)
from vadi_hisaab.models.crop import CropRecord, CropSeason, CropStatus
from vadi_hisaab.models.ledger import ExpenseCategory, IncomeCategory
from vadi_hisaab.models.profile import FarmerProfile
from vadi_hisaab.services.api.interface import (
    ApiError,
    AuthInterface,
    ConnectionRefusedApiError,
    CropStorageInterface,
    ExpenseStorageInterface,
    HostUnreachableError,
    IncomeStorageInterface,
    NetworkError,
    NotFoundError,
    ProfileStorageInterface,
    RequestTimeoutError,
    ServerError,
    TransportError,
)
from vadi_hisaab.services.api.token_store import TokenStore


logger = structlog.get_logger(__name__)

_UNREACHABLE_ERRNOS = frozenset({errno.ENETUNREACH, errno.EHOSTUNREACH})
_UNREACHABLE_TEXT = (
    "name or service not known",
    "nodename nor servname",
    "no address associated",
    "unreachable",
)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def classify_transport_error(exc: httpx.TransportError) -> TransportError:
    """Map an httpx failure with no response to our transport taxonomy."""
    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError()

    for cause in _causes(exc):
        if isinstance(cause, ConnectionRefusedError):
            return ConnectionRefusedApiError()
        if isinstance(cause, socket.gaierror):
            return HostUnreachableError()
        if isinstance(cause, OSError) and cause.errno in _UNREACHABLE_ERRNOS:
            return HostUnreachableError()

    text = str(exc).lower()
    if "refused" in text:
        return ConnectionRefusedApiError()
    if any(marker in text for marker in _UNREACHABLE_TEXT):
        return HostUnreachableError()
    return NetworkError()


def server_error_from(response: httpx.Response) -> ServerError:
    """ServerError carrying the body's message, or a generic one."""
    message = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")

    if response.status_code == 404:
        return NotFoundError(message, response.status_code)
    return ServerError(message, response.status_code)


def _unwrap(body: Any, *keys: str) -> Any:
    """The first of `keys` present in a response envelope, else the body."""
    if isinstance(body, dict):
        for key in keys:
            if body.get(key) is not None:
                return body[key]
    return body


def _clean_params(params: dict) -> dict:
    return {
        k: (v.value if hasattr(v, "value") else v)
        for k, v in params.items()
        if v is not None
    }


class ApiClient:
    """
    Thin async JSON client for the persistence service.

    Use as an async context manager, or call aclose() when done.
    """

    def __init__(
        self,
        token_store: TokenStore,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings().api
        self._tokens = token_store
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.base_url,
            timeout=timeout or settings.timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Any = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body (None if empty).

        Raises:
            TransportError: No response (subclass tells why)
            ServerError: Non-2xx response
        """
        headers = {}
        token = self._tokens.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("api_request", method=method, path=path)
        try:
            response = await self._client.request(
                method,
                path,
                params=_clean_params(params or {}),
                json=json,
                headers=headers,
            )
        except httpx.TransportError as e:
            error = classify_transport_error(e)
            logger.warning(
                "api_transport_failed",
                method=method,
                path=path,
                error_type=type(error).__name__,
                cause=str(e),
            )
            raise error from e

        logger.debug("api_response", method=method, path=path, status=response.status_code)

        if not response.is_success:
            error = server_error_from(response)
            logger.warning(
                "api_server_error",
                method=method,
                path=path,
                status=response.status_code,
                message=str(error),
            )
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ServerError("Server sent an unreadable response", response.status_code) from e


def _page(body: Any, parse) -> Page:
    items = _unwrap(body, "data") or []
    pagination = Pagination()
    if isinstance(body, dict) and isinstance(body.get("pagination"), dict):
        pagination = Pagination.model_validate(body["pagination"])
    return Page(items=[parse(item) for item in items], pagination=pagination)


# =============================================================================
# RESOURCES
# =============================================================================

class HttpAuthService(AuthInterface):
    """POST /auth/send-otp, /auth/verify-otp, /auth/consent."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def send_otp(self, phone: str) -> OtpRequest:
        body = await self._client.request("POST", "/auth/send-otp", json={"phone": phone})
        return OtpRequest.model_validate(body)

    async def verify_otp(self, phone: str, otp: str, session_id: str) -> VerifyResult:
        body = await self._client.request(
            "POST",
            "/auth/verify-otp",
            json={"phone": phone, "otp": otp, "sessionId": session_id},
        )
        result = VerifyResult.model_validate(body)
        self._client.tokens.save(result.token)
        return result

    async def save_consent(self, consent: bool) -> bool:
        body = await self._client.request("POST", "/auth/consent", json={"consent": consent})
        if isinstance(body, dict) and "analyticsConsent" in body:
            return bool(body["analyticsConsent"])
        return consent

    async def logout(self) -> None:
        self._client.tokens.clear()

    @property
    def is_signed_in(self) -> bool:
        return self._client.tokens.get() is not None


class HttpCropStorage(CropStorageInterface):
    """/crops resource."""

    def __init__(self, client: ApiClient, page_size: Optional[int] = None):
        self._client = client
        self._page_size = page_size or get_settings().app.crop_page_size

    async def create(self, crop: CropRecord) -> CropRecord:
        body = await self._client.request("POST", "/crops", json=crop.to_wire())
        return CropRecord.model_validate(_unwrap(body, "data"))

    async def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        season: Optional[CropSeason] = None,
        status: Optional[CropStatus] = None,
    ) -> Page[CropRecord]:
        body = await self._client.request(
            "GET",
            "/crops",
            params={
                "page": page,
                "limit": limit or self._page_size,
                "season": season,
                "status": status,
            },
        )
        return _page(body, CropRecord.model_validate)

    async def get(self, crop_id: str) -> CropRecord:
        body = await self._client.request("GET", f"/crops/{crop_id}")
        return CropRecord.model_validate(_unwrap(body, "data"))

    async def update(self, crop_id: str, changes: dict) -> CropRecord:
        body = await self._client.request("PUT", f"/crops/{crop_id}", json=changes)
        return CropRecord.model_validate(_unwrap(body, "data"))

    async def update_status(self, crop_id: str, status: CropStatus) -> CropRecord:
        body = await self._client.request(
            "PATCH",
            f"/crops/{crop_id}/status",
            json={"status": CropStatus(status).value},
        )
        return CropRecord.model_validate(_unwrap(body, "data"))

    async def delete(self, crop_id: str) -> None:
        await self._client.request("DELETE", f"/crops/{crop_id}")


class HttpExpenseStorage(ExpenseStorageInterface):
    """/expenses resource."""

    def __init__(self, client: ApiClient, page_size: Optional[int] = None):
        self._client = client
        self._page_size = page_size or get_settings().app.expense_page_size

    async def create(self, expense: ExpenseRecord) -> ExpenseRecord:
        body = await self._client.request("POST", "/expenses", json=expense.to_wire())
        return ExpenseRecord.from_wire(_unwrap(body, "data"))

    async def list(
        self,
        crop_id: Optional[str] = None,
        category: Optional[ExpenseCategory] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page[ExpenseRecord]:
        body = await self._client.request(
            "GET",
            "/expenses",
            params={
                "cropId": crop_id,
                "category": category,
                "page": page,
                "limit": limit or self._page_size,
            },
        )
        return _page(body, ExpenseRecord.from_wire)

    async def get(self, expense_id: str) -> ExpenseRecord:
        body = await self._client.request("GET", f"/expenses/{expense_id}")
        return ExpenseRecord.from_wire(_unwrap(body, "data"))

    async def delete(self, expense_id: str) -> None:
        await self._client.request("DELETE", f"/expenses/{expense_id}")


class HttpIncomeStorage(IncomeStorageInterface):
    """/income resource."""

    def __init__(self, client: ApiClient, page_size: Optional[int] = None):
        self._client = client
        self._page_size = page_size or get_settings().app.income_page_size

    async def create(self, income: IncomeRecord) -> IncomeRecord:
        body = await self._client.request("POST", "/income", json=income.to_wire())
        return IncomeRecord.from_wire(_unwrap(body, "data"))

    async def get(self, income_id: str) -> IncomeRecord:
        body = await self._client.request("GET", f"/income/{income_id}")
        return IncomeRecord.from_wire(_unwrap(body, "data"))

    async def update(self, income_id: str, income: IncomeRecord) -> IncomeRecord:
        payload = income.to_wire()
        payload.pop("_id", None)
        body = await self._client.request("PUT", f"/income/{income_id}", json=payload)
        return IncomeRecord.from_wire(_unwrap(body, "data"))

    async def list(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        crop_id: Optional[str] = None,
        category: Optional[IncomeCategory] = None,
        year: Optional[int] = None,
    ) -> Page[IncomeRecord]:
        body = await self._client.request(
            "GET",
            "/income",
            params={
                "page": page,
                "limit": limit or self._page_size,
                "cropId": crop_id,
                "category": category,
                "year": year,
            },
        )
        return _page(body, IncomeRecord.from_wire)

    async def summary(self, year: Optional[int] = None) -> IncomeSummary:
        body = await self._client.request("GET", "/income/summary", params={"year": year})
        return IncomeSummary.model_validate(body)

    async def delete(self, income_id: str) -> None:
        await self._client.request("DELETE", f"/income/{income_id}")


class HttpProfileStorage(ProfileStorageInterface):
    """/profile resource. Payloads must already hold location keys."""

    def __init__(self, client: ApiClient):
        self._client = client

    async def get_mine(self) -> FarmerProfile:
        body = await self._client.request("GET", "/profile/me")
        return FarmerProfile.model_validate(_unwrap(body, "profile", "data"))

    async def complete(self, payload: dict) -> FarmerProfile:
        body = await self._client.request("POST", "/profile/complete", json=payload)
        return FarmerProfile.model_validate(_unwrap(body, "profile", "data"))

    async def update(self, payload: dict) -> FarmerProfile:
        body = await self._client.request("PUT", "/profile/update", json=payload)
        return FarmerProfile.model_validate(_unwrap(body, "profile", "data"))


__all__ = [
    "ApiClient",
    "ApiError",
    "HttpAuthService",
    "HttpCropStorage",
    "HttpExpenseStorage",
    "HttpIncomeStorage",
    "HttpProfileStorage",
    "classify_transport_error",
    "server_error_from",
]
