"""FastAPI application entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse, Response

import locallibrary.models  # noqa: F401  register tables before init_db
from locallibrary.api import api_router
from locallibrary.api.rendering import render
from locallibrary.config import settings
from locallibrary.core.exceptions import AppException, NotFoundError
from locallibrary.core.logging import get_logger, setup_logging
from locallibrary.database import close_db, init_db
from locallibrary.schemas import StatusResponse

setup_logging(settings.log_level)
logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    # Startup
    await init_db()
    logger.info(f"{settings.app_name} started")
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Local library catalog",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# Exception handlers
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> Response:
    """Render the error page for missing records."""
    return render(
        request,
        "error",
        {"title": exc.message, "message": exc.message, "status_code": 404},
        status_code=404,
    )


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> Response:
    """Handle application exceptions (store failures included)."""
    logger.error(f"{exc.error_code}: {exc.message}")
    message = exc.message if settings.debug else "Internal server error"
    return render(
        request,
        "error",
        {"title": "Error", "message": message, "status_code": 500},
        status_code=500,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}")
    message = f"{type(exc).__name__}: {exc}" if settings.debug else "Internal server error"
    return render(
        request,
        "error",
        {"title": "Error", "message": message, "status_code": 500},
        status_code=500,
    )


app.include_router(api_router)


# Health check endpoint
@app.get("/health", response_model=StatusResponse)
async def health_check() -> StatusResponse:
    """Health check endpoint."""
    return StatusResponse(status="healthy", message=f"{settings.app_name} is running")


@app.get("/")
async def root():
    """Send visitors to the catalog home page."""
    return RedirectResponse("/catalog")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "locallibrary.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
