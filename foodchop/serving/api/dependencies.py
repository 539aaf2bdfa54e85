"""
FastAPI Dependencies

Request-scoped access to the marketplace and the caller identity, plus the
translation of service results into HTTP responses.
"""

from typing import TypeVar

from fastapi import HTTPException, Request

from foodchop.config import Settings
from foodchop.domain import Err, ErrorKind, Result
from foodchop.services import FoodMarketplace

T = TypeVar("T")

ERROR_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_ID: 409,
    ErrorKind.STORAGE_FAILURE: 503,
}


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_marketplace(request: Request) -> FoodMarketplace:
    """
    FastAPI dependency for the marketplace built at startup.
    
    Example:
        @router.get("/items")
        async def get_items(marketplace: FoodMarketplace = Depends(get_marketplace)):
            ...
    """
    marketplace = getattr(request.app.state, "marketplace", None)
    if marketplace is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return marketplace


def get_caller(request: Request) -> str:
    """Caller identity from the configured header; anonymous if absent."""
    security = request.app.state.settings.security
    return request.headers.get(security.caller_header) or security.anonymous_principal


def unwrap(result: Result[T]) -> T:
    """Return the value of an Ok result, raise HTTPException for an Err."""
    if isinstance(result, Err):
        raise HTTPException(
            status_code=ERROR_STATUS_CODES.get(result.kind, 400),
            detail=result.message,
        )
    return result.value
