import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy import asc, desc, or_, update
from sqlalchemy.orm import Session

from ..models.db.job_role import (
    CLOSED_STATUS,
    OPEN_STATUS,
    Band,
    Capability,
    JobAvailabilityStatus,
    JobRole,
)

logger = logging.getLogger(__name__)

JOB_SORT_FIELDS = {
    "roleName": JobRole.role_name,
    "name": JobRole.role_name,
    "location": JobRole.location,
    "closingDate": JobRole.closing_date,
    "capabilityName": Capability.name,
    "bandName": Band.name,
    "statusName": JobAvailabilityStatus.name,
    "openPositions": JobRole.open_positions,
}
DEFAULT_JOB_SORT = "roleName"


def order_direction(sort_order: Optional[str]):
    return desc if (sort_order or "").lower() == "desc" else asc


class JobRepository:
    """Persistence for job roles and the capability/band/status lookups."""

    def __init__(self, db: Session):
        self.db = db

    def _active_jobs(self):
        return self.db.query(JobRole).filter(JobRole.deleted.is_(False))

    def get_all_jobs(
        self,
        sort_by: str = DEFAULT_JOB_SORT,
        sort_order: str = "asc",
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[JobRole]:
        sort_column = JOB_SORT_FIELDS.get(sort_by, JOB_SORT_FIELDS[DEFAULT_JOB_SORT])
        query = (
            self._active_jobs()
            .outerjoin(Capability, JobRole.capability_id == Capability.id)
            .outerjoin(Band, JobRole.band_id == Band.id)
            .outerjoin(JobAvailabilityStatus, JobRole.status_id == JobAvailabilityStatus.id)
            .order_by(order_direction(sort_order)(sort_column), JobRole.id)
        )
        if limit is not None:
            query = query.limit(limit)
        if offset is not None:
            query = query.offset(offset)
        return query.all()

    def get_job_by_id(self, job_role_id: int) -> Optional[JobRole]:
        return self._active_jobs().filter(JobRole.id == job_role_id).first()

    def add_job_role(self, values: Dict[str, Any]) -> Optional[JobRole]:
        """Insert a job role. IntegrityError (e.g. unknown capability) is left to the caller."""
        job_role = JobRole(**values)
        self.db.add(job_role)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if job_role.id is None:
            return None
        return self.get_job_by_id(job_role.id)

    def update_job_role(self, job_role_id: int, updates: Dict[str, Any]) -> Optional[JobRole]:
        job_role = self.get_job_by_id(job_role_id)
        if job_role is None:
            return None
        for key, value in updates.items():
            setattr(job_role, key, value)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(job_role)
        logger.info("Updated job role %s: %s", job_role_id, sorted(updates))
        return job_role

    def delete_job(self, job_role_id: int) -> bool:
        affected = (
            self._active_jobs()
            .filter(JobRole.id == job_role_id)
            .update({JobRole.deleted: True}, synchronize_session=False)
        )
        self.db.commit()
        return affected > 0

    def decrement_open_positions(self, job_role_id: int) -> bool:
        """
        Take one position from an active role that still has one.
        Does not commit; the caller owns the transaction.
        """
        affected = (
            self._active_jobs()
            .filter(JobRole.id == job_role_id, JobRole.open_positions > 0)
            .update({JobRole.open_positions: JobRole.open_positions - 1}, synchronize_session=False)
        )
        return affected > 0

    def get_all_capabilities(self) -> List[Capability]:
        return self.db.query(Capability).order_by(Capability.name).all()

    def get_all_bands(self) -> List[Band]:
        return self.db.query(Band).order_by(Band.name).all()

    def get_all_statuses(self) -> List[JobAvailabilityStatus]:
        return self.db.query(JobAvailabilityStatus).order_by(JobAvailabilityStatus.name).all()

    def get_status_id(self, status_name: str) -> Optional[int]:
        status = self.db.query(JobAvailabilityStatus).filter(JobAvailabilityStatus.name == status_name).first()
        return status.id if status else None

    def auto_close_expired_job_roles(self, today: date) -> List[Any]:
        """
        Close every active Open role whose closing date has passed or that has no
        positions left, as one conditional UPDATE. Returns the closed rows.
        """
        open_id = self.get_status_id(OPEN_STATUS)
        closed_id = self.get_status_id(CLOSED_STATUS)
        if open_id is None or closed_id is None:
            logger.error("Job availability statuses are not seeded; cannot auto-close job roles")
            return []

        stmt = (
            update(JobRole)
            .where(
                JobRole.deleted.is_(False),
                JobRole.status_id == open_id,
                or_(JobRole.closing_date < today, JobRole.open_positions <= 0),
            )
            .values(status_id=closed_id)
            .returning(JobRole.id, JobRole.role_name, JobRole.closing_date, JobRole.open_positions)
            .execution_options(synchronize_session=False)
        )
        try:
            closed = self.db.execute(stmt).all()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        for row in closed:
            reason = "past closing date" if row.closing_date < today else "no open positions"
            logger.info("Auto-closed job role %s: %r (%s)", row.id, row.role_name, reason)
        return closed
