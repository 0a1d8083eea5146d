"""Persistence service client: interfaces, errors and the httpx implementation."""

from vadi_hisaab.services.api.http_client import (
    ApiClient,
    HttpAuthService,
    HttpCropStorage,
    HttpExpenseStorage,
    HttpIncomeStorage,
    HttpProfileStorage,
    classify_transport_error,
    server_error_from,
)
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
from vadi_hisaab.services.api.token_store import MemoryTokenStore, TokenStore

__all__ = [
    # Client
    "ApiClient",
    "HttpAuthService",
    "HttpCropStorage",
    "HttpExpenseStorage",
    "HttpIncomeStorage",
    "HttpProfileStorage",
    "classify_transport_error",
    "server_error_from",
    # Interfaces
    "AuthInterface",
    "CropStorageInterface",
    "ExpenseStorageInterface",
    "IncomeStorageInterface",
    "ProfileStorageInterface",
    # Errors
    "ApiError",
    "ConnectionRefusedApiError",
    "HostUnreachableError",
    "NetworkError",
    "NotFoundError",
    "RequestTimeoutError",
    "ServerError",
    "TransportError",
    # Session
    "MemoryTokenStore",
    "TokenStore",
]
