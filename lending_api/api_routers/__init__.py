"""API routers for modular endpoint organization.

This package contains FastAPI routers for the API server organized by functionality.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

from .health import router as health_router
from .applications import router as applications_router
from .reviews import router as reviews_router

__all__ = [
    "health_router",
    "applications_router",
    "reviews_router",
]
