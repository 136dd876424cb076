"""FastAPI server for loan application intake and review.

This module provides a REST API through which applicants submit loan
applications and credit officers review and override automated decisions.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT

Example:
    Run the server::

        python -m lending_api.run_api --port 8000

    Or use uvicorn directly::

        uvicorn lending_api.api:app --reload --port 8000
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from workflows import (
    ApplicationNotFoundError,
    ApplicationValidationError,
    DuplicateApplicationError,
    InvalidTransitionError,
    PersistenceError,
    ProviderError,
)

from . import __version__
from .api_routers import applications_router, health_router, reviews_router
from .api_utils import initialize_service, is_initialized
from .logging_config import setup_logging

# Configure logging
logger = setup_logging('api')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup; tests and run_api may have initialized the service already
    if not is_initialized():
        initialize_service()
    yield


# Create FastAPI app
app = FastAPI(
    title="Loan Intake & Review API",
    description="Submit loan applications for automated decisioning and review or override the decisions",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Allow the applicant portal and reviewer dashboard to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests with timing information."""
    start_time = time.time()

    logger.info(
        f"Incoming request: {request.method} {request.url.path}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None
        }
    )

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2)
        }
    )

    return response


@app.exception_handler(ApplicationValidationError)
async def validation_error_handler(request: Request, exc: ApplicationValidationError):
    logger.warning(f"Rejected request {request.url.path}: {exc}")
    return JSONResponse(
        status_code=422,
        content={"error": str(exc), "detail": None, "document_name": exc.document_name},
    )


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError):
    return JSONResponse(
        status_code=502,
        content={
            "error": "Processing failed",
            "detail": str(exc.cause) if exc.cause else str(exc),
        },
    )


@app.exception_handler(ApplicationNotFoundError)
async def not_found_handler(request: Request, exc: ApplicationNotFoundError):
    return JSONResponse(status_code=404, content={"error": str(exc), "detail": None})


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=409, content={"error": str(exc), "detail": None})


@app.exception_handler(DuplicateApplicationError)
async def duplicate_handler(request: Request, exc: DuplicateApplicationError):
    logger.error(f"Duplicate application id on {request.url.path}: {exc}")
    return JSONResponse(status_code=409, content={"error": str(exc), "detail": None})


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error(f"Storage failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": "Storage unavailable", "detail": str(exc)})


app.include_router(health_router)
app.include_router(applications_router)
app.include_router(reviews_router)
