import logging
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import IntegrityError

from .. import schemas
from ..models.db.job_role import OPEN_STATUS, Band, Capability, JobAvailabilityStatus, JobRole
from ..repositories.job_repository import DEFAULT_JOB_SORT, JobRepository
from ..utils.errors import ValidationError
from ..utils.validators import parse_iso_date, utc_today

logger = logging.getLogger(__name__)

INVALID_DATE_FORMAT = "Invalid closing date format. Use YYYY-MM-DD"
INVALID_LOOKUP_IDS = "Invalid capability ID or band ID. Please select valid options from the dropdown."


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


class JobService:
    """Validation and orchestration for job roles."""

    def __init__(self, job_repository: JobRepository, today: Callable[[], date] = utc_today):
        self.job_repository = job_repository
        self.today = today

    def fetch_jobs(
        self,
        sort_by: str = DEFAULT_JOB_SORT,
        sort_order: str = "asc",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[JobRole]:
        if limit is not None and limit < 0:
            raise ValidationError("Limit must be a non-negative integer")
        if offset is not None and offset < 0:
            raise ValidationError("Offset must be a non-negative integer")
        jobs = self.job_repository.get_all_jobs(sort_by, sort_order, limit, offset)
        logger.debug("Fetched %d job roles (sort_by=%s, sort_order=%s)", len(jobs), sort_by, sort_order)
        return jobs

    def get_job_by_id(self, job_role_id: int) -> Optional[JobRole]:
        if job_role_id is None or job_role_id <= 0:
            raise ValidationError("Invalid job role ID")
        return self.job_repository.get_job_by_id(job_role_id)

    def add_job(self, job_data: schemas.JobRoleCreate) -> Optional[JobRole]:
        if _is_blank(job_data.role_name):
            raise ValidationError("Role name is required")
        if _is_blank(job_data.location):
            raise ValidationError("Location is required")
        if not job_data.capability_id or job_data.capability_id <= 0:
            raise ValidationError("Valid capability ID is required")
        if not job_data.band_id or job_data.band_id <= 0:
            raise ValidationError("Valid band ID is required")

        closing_date = parse_iso_date(job_data.closing_date)
        if closing_date is None:
            raise ValidationError(INVALID_DATE_FORMAT)
        if closing_date < self.today():
            raise ValidationError("Closing date must be in the future")

        if job_data.open_positions is not None and job_data.open_positions <= 0:
            raise ValidationError("Open positions must be greater than 0")

        status_id = job_data.status_id or self.job_repository.get_status_id(OPEN_STATUS)
        values: Dict[str, Any] = {
            "role_name": job_data.role_name.strip(),
            "location": job_data.location.strip(),
            "capability_id": job_data.capability_id,
            "band_id": job_data.band_id,
            "status_id": status_id,
            "closing_date": closing_date,
            "description": job_data.description or None,
            "responsibilities": job_data.responsibilities or None,
            "job_spec_url": job_data.job_spec_url or None,
            "open_positions": job_data.open_positions or 1,
            "deleted": False,
        }

        try:
            job_role = self.job_repository.add_job_role(values)
        except IntegrityError as e:
            logger.warning("Rejected job role %r: %s", values["role_name"], e.orig)
            raise ValidationError(INVALID_LOOKUP_IDS) from e

        if job_role is None:
            logger.error("Job role %r was not persisted", values["role_name"])
            return None
        logger.info("Created job role %s: %r in %s", job_role.id, job_role.role_name, job_role.location)
        return job_role

    def update_job_role(self, job_role_id: int, patch: schemas.JobRoleUpdate) -> Optional[JobRole]:
        if job_role_id is None or job_role_id <= 0:
            raise ValidationError("Invalid job role ID")

        updates = patch.model_dump(exclude_unset=True)
        if not updates:
            raise ValidationError("No updates provided")

        if "closing_date" in updates:
            closing_date = parse_iso_date(updates["closing_date"])
            if closing_date is None:
                raise ValidationError(INVALID_DATE_FORMAT)
            updates["closing_date"] = closing_date

        for field, label in (("role_name", "Role name"), ("location", "Location")):
            if field in updates:
                if _is_blank(updates[field]):
                    raise ValidationError(f"{label} cannot be empty")
                updates[field] = updates[field].strip()

        for field, message in (
            ("capability_id", "Valid capability ID is required"),
            ("band_id", "Valid band ID is required"),
            ("status_id", "Valid status ID is required"),
        ):
            if field in updates and (updates[field] is None or updates[field] <= 0):
                raise ValidationError(message)

        if "open_positions" in updates:
            if updates["open_positions"] is None or updates["open_positions"] < 0:
                raise ValidationError("Open positions cannot be negative")

        try:
            return self.job_repository.update_job_role(job_role_id, updates)
        except IntegrityError as e:
            logger.warning("Rejected update for job role %s: %s", job_role_id, e.orig)
            raise ValidationError(INVALID_LOOKUP_IDS) from e

    def delete_job(self, job_role_id: int) -> bool:
        if job_role_id is None or job_role_id <= 0:
            raise ValidationError("Invalid job role ID")
        deleted = self.job_repository.delete_job(job_role_id)
        if deleted:
            logger.info("Soft-deleted job role %s", job_role_id)
        return bool(deleted)

    def get_capabilities(self) -> List[Capability]:
        return self.job_repository.get_all_capabilities()

    def get_bands(self) -> List[Band]:
        return self.job_repository.get_all_bands()

    def get_statuses(self) -> List[JobAvailabilityStatus]:
        return self.job_repository.get_all_statuses()

    def auto_close_expired_job_roles(self) -> Dict[str, Any]:
        """
        Flip Open roles to Closed once their closing date has passed or their
        positions are filled. Safe to repeat: a second run finds nothing to close.
        """
        logger.info("Starting auto-close of expired job roles")
        closed = self.job_repository.auto_close_expired_job_roles(self.today())
        closed_count = len(closed)
        message = (
            f"Successfully auto-closed {closed_count} job role(s)"
            if closed_count > 0
            else "No job roles needed to be closed"
        )
        logger.info(message)
        return {"closed_count": closed_count, "message": message}
