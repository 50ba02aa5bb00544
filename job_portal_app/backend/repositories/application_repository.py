import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ..models.db.application import ACCEPTED, HIRED, PENDING, REJECTED, Application
from ..models.db.job_role import JobRole
from ..utils.validators import utc_now
from .job_repository import order_direction

logger = logging.getLogger(__name__)

APPLICATION_SORT_FIELDS = {
    "applicationID": Application.id,
    "jobRoleId": Application.job_role_id,
    "emailAddress": Application.email_address,
    "phoneNumber": Application.phone_number,
    "status": Application.status,
    "createdAt": Application.created_at,
    "updatedAt": Application.updated_at,
}
APPLICATION_WITH_ROLE_SORT_FIELDS = {
    **APPLICATION_SORT_FIELDS,
    "jobRoleName": JobRole.role_name,
    "jobRoleLocation": JobRole.location,
}
DEFAULT_APPLICATION_SORT = "createdAt"


class ApplicationRepository:
    """Persistence for candidate applications."""

    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def create_application(self, values: Dict[str, Any]) -> Application:
        now = utc_now()
        application = Application(**values, status=PENDING, created_at=now, updated_at=now)
        self.db.add(application)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(application)
        return application

    def get_application_by_id(self, application_id: int) -> Optional[Application]:
        return self.db.query(Application).filter(Application.id == application_id).first()

    def get_application_with_job_role(self, application_id: int) -> Optional[Application]:
        return (
            self.db.query(Application)
            .options(joinedload(Application.job_role))
            .filter(Application.id == application_id)
            .first()
        )

    def get_all_applications(self, sort_by: str = DEFAULT_APPLICATION_SORT, sort_order: str = "desc") -> List[Application]:
        sort_column = APPLICATION_SORT_FIELDS.get(sort_by, APPLICATION_SORT_FIELDS[DEFAULT_APPLICATION_SORT])
        return (
            self.db.query(Application)
            .order_by(order_direction(sort_order)(sort_column), Application.id)
            .all()
        )

    def get_applications_with_job_roles(
        self, sort_by: str = DEFAULT_APPLICATION_SORT, sort_order: str = "desc"
    ) -> List[Application]:
        sort_column = APPLICATION_WITH_ROLE_SORT_FIELDS.get(
            sort_by, APPLICATION_WITH_ROLE_SORT_FIELDS[DEFAULT_APPLICATION_SORT]
        )
        return (
            self.db.query(Application)
            .outerjoin(JobRole, Application.job_role_id == JobRole.id)
            .options(joinedload(Application.job_role))
            .order_by(order_direction(sort_order)(sort_column), Application.id)
            .all()
        )

    def get_applications_by_email(self, email_address: str) -> List[Application]:
        return (
            self.db.query(Application)
            .options(joinedload(Application.job_role))
            .filter(Application.email_address == email_address)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )

    def get_applications_by_job_role(self, job_role_id: int) -> List[Application]:
        return (
            self.db.query(Application)
            .filter(Application.job_role_id == job_role_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )

    def update_application_status(self, application_id: int, status: str, commit: bool = True) -> Optional[Application]:
        application = self.get_application_by_id(application_id)
        if application is None:
            return None
        application.status = status
        application.updated_at = utc_now()
        if commit:
            try:
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise
            self.db.refresh(application)
        else:
            self.db.flush()
        return application

    def delete_application(self, application_id: int) -> bool:
        deleted = (
            self.db.query(Application)
            .filter(Application.id == application_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return deleted > 0

    def _count(self, *criteria) -> int:
        return self.db.query(func.count(Application.id)).filter(*criteria).scalar() or 0

    def get_application_analytics(self, start: datetime, end: datetime) -> Dict[str, int]:
        """Counts for the half-open window [start, end)."""
        created = self._count(Application.created_at >= start, Application.created_at < end)

        def status_changed(status: str) -> int:
            return self._count(
                Application.status == status,
                Application.updated_at >= start,
                Application.updated_at < end,
            )

        return {
            "applications_created_today": created,
            "applications_hired_today": status_changed(HIRED),
            "applications_rejected_today": status_changed(REJECTED),
            "applications_accepted_today": status_changed(ACCEPTED),
            "total_applications_today": created,
        }
