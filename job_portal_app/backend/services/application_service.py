import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from .. import schemas
from ..models.db.application import (
    ADMIN_SETTABLE_STATUSES,
    FINAL_STATUSES,
    HIREABLE_STATUSES,
    HIRED,
    REJECTED,
    Application,
)
from ..models.db.job_role import JobRole
from ..repositories.application_repository import DEFAULT_APPLICATION_SORT, ApplicationRepository
from ..repositories.job_repository import JobRepository
from ..utils.errors import ForbiddenError, NotFoundError, ValidationError
from ..utils.validators import is_valid_email, is_valid_phone_number, normalize_email

logger = logging.getLogger(__name__)

MAX_COVER_LETTER_LENGTH = 2000


class ApplicationService:
    """
    Business rules for applications.

    Submitting against a closed or full role is a routine outcome, so
    `submit_application` reports it as `{"success": False, "message": ...}`
    instead of raising. Everything else raises an `AppError` subclass.
    """

    def __init__(self, application_repository: ApplicationRepository, job_repository: JobRepository):
        self.application_repository = application_repository
        self.job_repository = job_repository

    @staticmethod
    def _require_positive_id(value: Optional[int], message: str = "Invalid application ID") -> None:
        if value is None or value <= 0:
            raise ValidationError(message)

    @staticmethod
    def _validate_application_data(data: schemas.ApplicationCreate) -> None:
        if not is_valid_email(data.email_address):
            raise ValidationError("Invalid email address format")
        if not is_valid_phone_number(data.phone_number):
            raise ValidationError("Invalid phone number. Must be a valid number")
        if not data.job_role_id or data.job_role_id <= 0:
            raise ValidationError("Valid job role ID is required")
        if data.cover_letter and len(data.cover_letter) > MAX_COVER_LETTER_LENGTH:
            raise ValidationError(f"Cover letter must be less than {MAX_COVER_LETTER_LENGTH} characters")

    @staticmethod
    def _rejected(message: str) -> Dict[str, Any]:
        return {"success": False, "application_id": None, "message": message}

    def submit_application(self, data: schemas.ApplicationCreate) -> Dict[str, Any]:
        try:
            self._validate_application_data(data)
        except ValidationError as e:
            logger.warning("Application rejected: %s", e.message)
            return self._rejected(e.message)

        job_role = self.job_repository.get_job_by_id(data.job_role_id)
        if job_role is None:
            logger.warning("Application rejected: job role %s not found", data.job_role_id)
            return self._rejected("Job role not found")
        if not job_role.is_open:
            logger.warning("Application rejected: job role %s is %s", job_role.id, job_role.status_name)
            return self._rejected("This job role is no longer accepting applications")
        if not job_role.open_positions or job_role.open_positions <= 0:
            logger.warning("Application rejected: job role %s has no open positions", job_role.id)
            return self._rejected("No open positions available for this job role")

        application = self.application_repository.create_application(
            {
                "job_role_id": data.job_role_id,
                "phone_number": data.phone_number.strip(),
                "email_address": normalize_email(data.email_address),
                "cover_letter": data.cover_letter or None,
                "notes": data.notes or None,
            }
        )
        logger.info("Application %s submitted for job role %s", application.id, job_role.id)
        return {
            "success": True,
            "application_id": application.id,
            "message": "Application submitted successfully",
        }

    def get_application_by_id(self, application_id: int) -> Optional[Application]:
        self._require_positive_id(application_id)
        return self.application_repository.get_application_by_id(application_id)

    def get_application_with_job_role(self, application_id: int) -> Optional[Application]:
        self._require_positive_id(application_id)
        return self.application_repository.get_application_with_job_role(application_id)

    def get_all_applications(self, sort_by: str = DEFAULT_APPLICATION_SORT, sort_order: str = "desc") -> List[Application]:
        return self.application_repository.get_all_applications(sort_by, sort_order)

    def get_applications_with_job_roles(
        self, sort_by: str = DEFAULT_APPLICATION_SORT, sort_order: str = "desc"
    ) -> List[Application]:
        return self.application_repository.get_applications_with_job_roles(sort_by, sort_order)

    def get_applications_by_email(self, email_address: Optional[str]) -> List[Application]:
        if not is_valid_email(email_address):
            raise ValidationError("Valid email address is required")
        return self.application_repository.get_applications_by_email(normalize_email(email_address))

    def get_applications_by_job_role(self, job_role_id: int) -> List[Application]:
        self._require_positive_id(job_role_id, "Invalid job role ID")
        return self.application_repository.get_applications_by_job_role(job_role_id)

    def update_application_status(self, application_id: int, status: Optional[str]) -> Optional[Application]:
        self._require_positive_id(application_id)
        if status not in ADMIN_SETTABLE_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(ADMIN_SETTABLE_STATUSES)}")

        current = self.application_repository.get_application_by_id(application_id)
        if current is None:
            return None
        self._ensure_not_final(current)

        application = self.application_repository.update_application_status(application_id, status)
        if application is not None:
            logger.info("Application %s status set to %s", application_id, status)
        return application

    @staticmethod
    def _ensure_not_final(application: Application) -> None:
        if application.status in FINAL_STATUSES:
            logger.warning("Refused status change of %s application %s", application.status, application.id)
            raise ForbiddenError(f"Cannot change the status of a {application.status.lower()} application")

    def reject_applicant(self, application_id: int) -> Application:
        self._require_positive_id(application_id)
        current = self.application_repository.get_application_by_id(application_id)
        if current is None:
            raise NotFoundError("Application not found")
        self._ensure_not_final(current)

        application = self.application_repository.update_application_status(application_id, REJECTED)
        logger.info("Application %s rejected", application_id)
        return application

    def hire_applicant(self, application_id: int) -> Dict[str, Any]:
        """
        Mark the application Hired and take one position from its job role.
        Both writes commit together or not at all.
        """
        self._require_positive_id(application_id)

        application = self.application_repository.get_application_by_id(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        if application.status not in HIREABLE_STATUSES:
            logger.warning("Refused hire of %s application %s", application.status, application_id)
            raise ForbiddenError(f"Only {' or '.join(HIREABLE_STATUSES)} applications can be hired")

        job_role: Optional[JobRole] = self.job_repository.get_job_by_id(application.job_role_id)
        if job_role is None:
            raise NotFoundError("Job role not found")
        if job_role.open_positions <= 0:
            raise ForbiddenError("No open positions available for this job role")

        try:
            self.application_repository.update_application_status(application_id, HIRED, commit=False)
            decremented = self.job_repository.decrement_open_positions(job_role.id)
            if decremented:
                self.application_repository.commit()
        except Exception:
            self.application_repository.rollback()
            logger.exception("Hire of application %s rolled back", application_id)
            raise

        if not decremented:
            # another hire took the last position between the check and the update
            self.application_repository.rollback()
            raise ForbiddenError("No open positions available for this job role")

        application = self.application_repository.get_application_by_id(application_id)
        job_role = self.job_repository.get_job_by_id(job_role.id)
        logger.info(
            "Application %s hired; job role %s now has %s open position(s)",
            application_id,
            job_role.id if job_role else None,
            job_role.open_positions if job_role else None,
        )
        return {"application": application, "job_role": job_role}

    def withdraw_application(self, application_id: int, requester_email: Optional[str]) -> bool:
        self._require_positive_id(application_id)
        if not is_valid_email(requester_email):
            raise ValidationError("Valid email address is required")

        application = self.application_repository.get_application_by_id(application_id)
        if application is None:
            raise NotFoundError("Application not found")
        if application.email_address != requester_email:
            logger.warning("Refused withdrawal of application %s by %s", application_id, requester_email)
            raise ForbiddenError("You can only withdraw your own applications")

        withdrawn = self.application_repository.delete_application(application_id)
        if withdrawn:
            logger.info("Application %s withdrawn by applicant", application_id)
        return withdrawn

    def get_application_analytics(self, target: date) -> Dict[str, Any]:
        """Counts for the UTC calendar day containing `target`."""
        if isinstance(target, datetime):
            target = target.date()
        start = datetime.combine(target, time.min)
        end = start + timedelta(days=1)
        counts = self.application_repository.get_application_analytics(start, end)
        return {"target_date": target, **counts}
