"""Health check and status endpoints.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

import shutil
from datetime import datetime
from typing import Dict, Any
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from utils.config import config

from .. import __version__
from ..api_utils import is_initialized, services

router = APIRouter(tags=["Health"])


def check_disk_space(path: str = ".") -> Dict[str, Any]:
    """Check available disk space."""
    try:
        stat = shutil.disk_usage(path)
        percent_used = (stat.used / stat.total) * 100

        return {
            "status": "healthy" if percent_used < 90 else "warning",
            "free_gb": round(stat.free / (1024**3), 2),
            "percent_used": round(percent_used, 2)
        }
    except Exception as e:
        return {"status": "error", "error": str(e)}


def check_configuration() -> Dict[str, Any]:
    """Check configuration values and the persistence directory."""
    errors = config.validate()
    result: Dict[str, Any] = {
        "status": "healthy" if not errors else "warning",
        "errors": errors,
        "persist_applications": config.PERSIST_APPLICATIONS,
    }
    if config.PERSIST_APPLICATIONS:
        applications_dir = config.applications_dir()
        result["applications_dir"] = str(applications_dir)
        result["applications_dir_exists"] = applications_dir.exists()
    return result


def check_workflow() -> Dict[str, Any]:
    if not is_initialized():
        return {"status": "unhealthy", "error": "Workflow not initialized"}
    workflow = services["workflow"]
    return {
        "status": "healthy",
        "provider": type(workflow.provider).__name__,
        "model": getattr(workflow.provider, "model", None),
        "stored_applications": len(workflow.store),
        "pending_reviews": services["review_queue"].pending_review_count(),
    }


@router.get("/", operation_id="root")
async def root():
    """Root endpoint - API health check."""
    if not is_initialized():
        return JSONResponse(
            status_code=503,
            content={"error": "Service not initialized", "detail": "Workflow not configured"}
        )
    return {
        "message": "Loan Intake & Review API",
        "version": __version__,
        "status": "operational",
        "stored_applications": len(services["workflow"].store),
    }


@router.get("/health", operation_id="health_check")
async def health_check():
    """Enhanced health check endpoint with dependency verification.

    Returns detailed health status including:
    - Workflow and decision provider status
    - Disk space availability
    - Configuration checks
    """
    checks = {
        "workflow": check_workflow(),
        "disk_space": check_disk_space(),
        "configuration": check_configuration(),
    }

    all_healthy = all(
        check.get("status") == "healthy"
        for check in checks.values()
    )

    return JSONResponse(
        status_code=200 if all_healthy else 503,
        content={
            "status": "healthy" if all_healthy else "degraded",
            "timestamp": datetime.now().isoformat(),
            "checks": checks
        }
    )
