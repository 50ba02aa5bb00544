"""
Cron-driven background tasks.

`SchedulerService` owns a registry of named tasks on one APScheduler
`BackgroundScheduler`. The app creates one instance, calls `initialize()` on
startup and `destroy()` on shutdown; routes reach it through a dependency.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from sqlalchemy.orm import Session

from ..repositories.job_repository import JobRepository
from .job_service import JobService

logger = logging.getLogger(__name__)

AUTO_CLOSE_TASK = "auto-close-expired-jobs"
DEFAULT_AUTO_CLOSE_CRON = "0 1 * * *"


@dataclass
class ScheduledTask:
    name: str
    cron_expression: str
    func: Callable[[], Any]
    running: bool = False


class SchedulerService:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        cron_expression: str = DEFAULT_AUTO_CLOSE_CRON,
        timezone_name: str = "UTC",
    ):
        self.session_factory = session_factory
        self.cron_expression = cron_expression
        self.timezone_name = timezone_name
        self.scheduler: Optional[BackgroundScheduler] = None
        self.tasks: Dict[str, ScheduledTask] = {}

    @property
    def is_initialized(self) -> bool:
        return self.scheduler is not None

    def initialize(self) -> None:
        """Register every task and start the scheduler. Calling it twice is a no-op."""
        if self.is_initialized:
            logger.debug("Scheduler already initialized")
            return
        logger.info("Initializing scheduled tasks...")
        self.scheduler = BackgroundScheduler(timezone=self.timezone_name)
        self.register_task(AUTO_CLOSE_TASK, self.cron_expression, self.run_auto_close_job_roles)
        self.scheduler.start()
        logger.info("All scheduled tasks initialized")

    def register_task(self, name: str, cron_expression: str, func: Callable[[], Any]) -> ScheduledTask:
        if self.scheduler is None:
            raise RuntimeError("Scheduler is not initialized")
        trigger = CronTrigger.from_crontab(cron_expression, timezone=self.timezone_name)
        self.scheduler.add_job(
            func,
            trigger,
            id=name,
            name=name,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        task = ScheduledTask(name=name, cron_expression=cron_expression, func=func, running=True)
        self.tasks[name] = task
        logger.info("Scheduled '%s' with cron expression '%s' (%s)", name, cron_expression, self.timezone_name)
        return task

    def start_task(self, name: str) -> bool:
        task = self.tasks.get(name)
        if task is None or task.running:
            return False
        self.scheduler.resume_job(name)
        task.running = True
        logger.info("Started task '%s'", name)
        return True

    def stop_task(self, name: str) -> bool:
        task = self.tasks.get(name)
        if task is None or not task.running:
            return False
        self.scheduler.pause_job(name)
        task.running = False
        logger.info("Stopped task '%s'", name)
        return True

    def start_all_tasks(self) -> None:
        for name in list(self.tasks):
            self.start_task(name)

    def stop_all_tasks(self) -> None:
        for name in list(self.tasks):
            self.stop_task(name)

    def get_task_statuses(self) -> List[Dict[str, Any]]:
        statuses = []
        for name, task in self.tasks.items():
            job = self.scheduler.get_job(name) if self.scheduler else None
            statuses.append(
                {
                    "name": name,
                    "cron_expression": task.cron_expression,
                    "running": task.running,
                    "next_run_time": getattr(job, "next_run_time", None),
                }
            )
        return statuses

    def _auto_close(self) -> Dict[str, Any]:
        db = self.session_factory()
        try:
            return JobService(JobRepository(db)).auto_close_expired_job_roles()
        finally:
            db.close()

    def run_auto_close_job_roles(self) -> None:
        """Scheduled entry point. Errors are logged, never raised into the scheduler."""
        started = datetime.now(timezone.utc).isoformat()
        logger.info("[%s] Running scheduled task: auto-close expired job roles", started)
        try:
            result = self._auto_close()
            logger.info("Auto-close task completed: %s", result["message"])
        except Exception:
            logger.exception("Error in auto-close task")

    def trigger_auto_close_job_roles(self) -> Dict[str, Any]:
        """Run the auto-close sweep now, on the caller's thread."""
        logger.info("Manually triggering auto-close of expired job roles")
        try:
            result = self._auto_close()
        except Exception:
            logger.exception("Manual auto-close trigger failed")
            raise
        logger.info("Manual trigger completed: %s", result["message"])
        return result

    def destroy(self) -> None:
        logger.info("Destroying all scheduled tasks...")
        if self.scheduler is not None:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.scheduler = None
        self.tasks.clear()
        logger.info("All scheduled tasks destroyed")
