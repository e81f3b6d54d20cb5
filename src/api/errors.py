"""Translate tagged domain errors into HTTP responses."""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.domain.errors import MarketplaceError, ValidationError

_STATUS_BY_KIND: dict[str, int] = {
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "unauthorized": status.HTTP_403_FORBIDDEN,
    "invalid_state": status.HTTP_409_CONFLICT,
    "invalid_argument": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
}


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    body: dict = {"error": exc.kind, "detail": str(exc)}  # type: ignore[type-arg]
    if isinstance(exc, ValidationError):
        body["missing_fields"] = exc.missing_fields
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST),
        content=body,
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
