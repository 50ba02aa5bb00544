"""
Health check endpoints.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

from ..config.settings import get_settings

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/health", summary="Health Check")
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "message": f"Welcome to {settings.app_name} v{settings.app_version}",
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/health/detailed", summary="Detailed Health Check")
def detailed_health_check(request: Request) -> Dict[str, Any]:
    """
    Health check with configuration problems and scheduler state.
    """
    settings = get_settings()
    scheduler = getattr(request.app.state, "scheduler", None)
    health_status = {
        "status": "healthy",
        "app_info": {
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
            "testing": settings.testing,
        },
        "configuration": {
            "log_level": settings.log_level,
            "database_type": "sqlite" if settings.get_database_url().startswith("sqlite") else "other",
            "cors_enabled": settings.cors_enabled,
            "api_docs_enabled": settings.api_docs_enabled,
        },
        "scheduler": {
            "enabled": settings.scheduler_enabled,
            "initialized": bool(scheduler and scheduler.is_initialized),
            "auto_close_cron_schedule": settings.auto_close_cron_schedule,
        },
    }

    config_issues = settings.validate_required_settings()
    if config_issues:
        health_status["status"] = "degraded"
        health_status["configuration_issues"] = config_issues
        logger.warning("Configuration issues found: %s", config_issues)

    return health_status
