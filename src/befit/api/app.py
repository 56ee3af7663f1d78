"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from befit.api.accounts import router as accounts_router
from befit.api.coach import router as coach_router
from befit.api.diary import router as diary_router
from befit.app_logging import configure_logging
from befit.containers import AppContainer
from befit.domain.errors import (
    AuthenticationError,
    DuplicateAccountError,
    MealAnalysisError,
)

ANALYSIS_FAILED_MESSAGE = "Failed to analyze meal. Please try again."


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="BeFit", lifespan=lifespan)
    app.state.container = container

    app.include_router(accounts_router)
    app.include_router(diary_router)
    app.include_router(coach_router)

    @app.exception_handler(AuthenticationError)
    async def authentication_failed(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": str(exc)}
        )

    @app.exception_handler(DuplicateAccountError)
    async def duplicate_account(
        request: Request, exc: DuplicateAccountError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(MealAnalysisError)
    async def analysis_failed(request: Request, exc: MealAnalysisError) -> JSONResponse:
        logger.warning("Meal analysis failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": ANALYSIS_FAILED_MESSAGE},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
