"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from family_photos.api.photos import router as photos_router
from family_photos.app_logging import configure_logging
from family_photos.containers import AppContainer
from family_photos.domain.errors import (
    FamilyPhotosError,
    FavoriteToggleError,
    NotInFamilyError,
    NotPhotoOwnerError,
    PhotoNotFoundError,
    ReadError,
    ToggleInProgressError,
    ValidationError,
)

_STATUS_BY_ERROR: list[tuple[type[FamilyPhotosError], int]] = [
    (NotInFamilyError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PhotoNotFoundError, status.HTTP_404_NOT_FOUND),
    (NotPhotoOwnerError, status.HTTP_403_FORBIDDEN),
    (ToggleInProgressError, status.HTTP_409_CONFLICT),
    (FavoriteToggleError, status.HTTP_502_BAD_GATEWAY),
    (ReadError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(photos_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(FamilyPhotosError)
    async def handle_domain_error(
        request: Request, exc: FamilyPhotosError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.warning(
                "Request failed", extra={"path": request.url.path, "error": str(exc)}
            )
        body: dict[str, object] = {"detail": str(exc)}
        if isinstance(exc, ReadError):
            body["retry"] = True
        if isinstance(exc, FavoriteToggleError):
            body["state"] = exc.state
        return JSONResponse(status_code=status_code, content=body)

    return app


def _status_for(exc: FamilyPhotosError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
