"""
Scheduler administration endpoints. Every route requires an admin.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from .. import schemas
from ..models.db.user import User
from ..services.scheduler_service import SchedulerService
from ..utils.errors import InternalError, ValidationError
from .dependencies import get_scheduler, require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/scheduler/status", response_model=schemas.SchedulerStatusResponse)
def scheduler_status(
    scheduler: SchedulerService = Depends(get_scheduler),
    admin: User = Depends(require_admin),
) -> Dict[str, Any]:
    tasks = [
        schemas.ScheduledTaskStatus(**task).model_dump(by_alias=True, mode="json")
        for task in scheduler.get_task_statuses()
    ]
    return {"success": True, "data": {"tasks": tasks, "timestamp": _timestamp()}}


@router.post("/scheduler/start/{task_name}", response_model=schemas.MessageResponse)
def start_task(
    task_name: str,
    scheduler: SchedulerService = Depends(get_scheduler),
    admin: User = Depends(require_admin),
):
    if not scheduler.start_task(task_name):
        raise ValidationError(f"Task '{task_name}' not found or already running")
    return {"success": True, "message": f"Task '{task_name}' started successfully"}


@router.post("/scheduler/stop/{task_name}", response_model=schemas.MessageResponse)
def stop_task(
    task_name: str,
    scheduler: SchedulerService = Depends(get_scheduler),
    admin: User = Depends(require_admin),
):
    if not scheduler.stop_task(task_name):
        raise ValidationError(f"Task '{task_name}' not found or already stopped")
    return {"success": True, "message": f"Task '{task_name}' stopped successfully"}


@router.post("/scheduler/start-all", response_model=schemas.MessageResponse)
def start_all_tasks(
    scheduler: SchedulerService = Depends(get_scheduler),
    admin: User = Depends(require_admin),
):
    scheduler.start_all_tasks()
    return {"success": True, "message": "All tasks started successfully"}


@router.post("/scheduler/stop-all", response_model=schemas.MessageResponse)
def stop_all_tasks(
    scheduler: SchedulerService = Depends(get_scheduler),
    admin: User = Depends(require_admin),
):
    scheduler.stop_all_tasks()
    return {"success": True, "message": "All tasks stopped successfully"}


@router.post("/scheduler/trigger/auto-close")
def trigger_auto_close(
    scheduler: SchedulerService = Depends(get_scheduler),
    admin: User = Depends(require_admin),
) -> Dict[str, Any]:
    """Run the auto-close sweep now and report what it closed."""
    logger.info("Admin %s triggered auto-close", admin.id)
    try:
        result = scheduler.trigger_auto_close_job_roles()
    except Exception as e:
        raise InternalError(f"Failed to trigger auto-close task: {e}") from e
    return {
        "success": True,
        "data": schemas.AutoCloseResult(**result).model_dump(by_alias=True),
        "timestamp": _timestamp(),
    }
