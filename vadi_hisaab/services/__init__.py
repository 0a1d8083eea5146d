"""Services package."""

from vadi_hisaab.services.api import (
    ApiClient,
    ApiError,
    HttpAuthService,
    HttpCropStorage,
    HttpExpenseStorage,
    HttpIncomeStorage,
    HttpProfileStorage,
    NotFoundError,
    ServerError,
    TokenStore,
    TransportError,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "HttpAuthService",
    "HttpCropStorage",
    "HttpExpenseStorage",
    "HttpIncomeStorage",
    "HttpProfileStorage",
    "NotFoundError",
    "ServerError",
    "TokenStore",
    "TransportError",
]
