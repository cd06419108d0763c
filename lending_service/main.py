"""
Main application entry point.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lending_service import __version__
from lending_service.api.errors import register_exception_handlers
from lending_service.api.middleware import correlation_id_middleware
from lending_service.api.v1.book_endpoints import router as books_router
from lending_service.utils.logging_utils import CORRELATION_ID_HEADER, configure_logging

APP_ENV = os.getenv("APP_ENV", "production")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]


def create_app(app_env: str = APP_ENV) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_env: Deployment environment; "development" exposes fault
            tracebacks in 500 responses

    Returns:
        Configured FastAPI instance
    """
    application = FastAPI(
        title="Book Lending Service API",
        description="A simple API for managing book lending operations.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    application.state.expose_fault_detail = app_env == "development"

    application.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_ID_HEADER, "Location"],
    )
    application.middleware("http")(correlation_id_middleware)

    register_exception_handlers(application)

    # Include API routers
    application.include_router(books_router, tags=["books"])

    return application


configure_logging(LOG_LEVEL)
app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("lending_service.main:app", host="0.0.0.0", port=8000, reload=True)
