from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from .. import schemas
from ..models.db.user import User
from ..repositories.application_repository import DEFAULT_APPLICATION_SORT
from ..services.application_service import ApplicationService
from ..utils.api_helpers import check_resource_exists, parse_positive_id, validation_failure
from ..utils.errors import ValidationError
from ..utils.validators import parse_iso_date, utc_today
from .dependencies import get_application_service, get_current_user, require_admin

router = APIRouter()

MISSING_FIELDS_MESSAGE = "Missing required fields: jobRoleId, emailAddress, and phoneNumber are required"


@router.post(
    "/applications",
    response_model=schemas.ApplicationSubmissionResult,
    status_code=status.HTTP_201_CREATED,
)
def submit_application(
    application: schemas.ApplicationCreate,
    application_service: ApplicationService = Depends(get_application_service),
):
    """
    Submit an application against an open job role.

    A closed or full role is reported as a 400 with the reason, not raised.
    """
    if not application.job_role_id or not application.email_address or not application.phone_number:
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    result = application_service.submit_application(application)
    if not result["success"]:
        return validation_failure(result["message"])
    return result


# Must be declared before /applications/{application_id}
@router.get("/applications/my-applications", response_model=List[schemas.ApplicationWithJobRole])
def read_my_applications(
    email: Optional[str] = Query(None),
    application_service: ApplicationService = Depends(get_application_service),
):
    return application_service.get_applications_by_email(email)


def _withdraw(application_id: str, current_user: User, application_service: ApplicationService):
    parsed_id = parse_positive_id(application_id, "Invalid application ID")
    application_service.withdraw_application(parsed_id, current_user.email)
    return {"success": True, "message": "Application withdrawn successfully"}


@router.delete("/applications/{application_id}/withdraw", response_model=schemas.MessageResponse)
def withdraw_application(
    application_id: str,
    current_user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service),
):
    """Withdraw one of the caller's own applications. The row is removed."""
    return _withdraw(application_id, current_user, application_service)


@router.post("/applications/{application_id}/withdraw", response_model=schemas.MessageResponse)
def withdraw_application_post(
    application_id: str,
    current_user: User = Depends(get_current_user),
    application_service: ApplicationService = Depends(get_application_service),
):
    return _withdraw(application_id, current_user, application_service)


@router.get("/applications", response_model=List[schemas.Application])
def read_applications(
    sort_by: str = Query(DEFAULT_APPLICATION_SORT, alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    return application_service.get_all_applications(sort_by, sort_order)


@router.get("/applications-with-roles", response_model=List[schemas.ApplicationWithJobRole])
def read_applications_with_roles(
    sort_by: str = Query(DEFAULT_APPLICATION_SORT, alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    return application_service.get_applications_with_job_roles(sort_by, sort_order)


@router.get("/applications/job-role/{job_role_id}", response_model=List[schemas.Application])
def read_applications_for_job_role(
    job_role_id: str,
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(job_role_id, "Invalid job role ID")
    return application_service.get_applications_by_job_role(parsed_id)


@router.get("/applications/{application_id}", response_model=schemas.Application)
def read_application(
    application_id: str,
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(application_id, "Invalid application ID")
    application = application_service.get_application_by_id(parsed_id)
    check_resource_exists(application, "Application not found")
    return application


@router.get("/applications/{application_id}/details", response_model=schemas.ApplicationWithJobRole)
def read_application_details(
    application_id: str,
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(application_id, "Invalid application ID")
    application = application_service.get_application_with_job_role(parsed_id)
    check_resource_exists(application, "Application not found")
    return application


@router.put("/applications/{application_id}/status", response_model=schemas.ApplicationStatusResponse)
def update_application_status(
    application_id: str,
    update: schemas.ApplicationStatusUpdate,
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(application_id, "Application ID and status are required")
    if not update.status:
        raise ValidationError("Application ID and status are required")
    application = application_service.update_application_status(parsed_id, update.status)
    check_resource_exists(application, "Application not found")
    return {
        "success": True,
        "message": "Application status updated successfully",
        "application": application,
    }


@router.put("/applications/{application_id}/hire", response_model=schemas.ApplicationHireResponse)
def hire_applicant(
    application_id: str,
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    """Mark the applicant Hired and take one open position from the role."""
    parsed_id = parse_positive_id(application_id, "Invalid application ID")
    result = application_service.hire_applicant(parsed_id)
    return {
        "success": True,
        "message": "Applicant hired successfully",
        "application": result["application"],
        "job_role": result["job_role"],
    }


@router.put("/applications/{application_id}/reject", response_model=schemas.ApplicationStatusResponse)
def reject_applicant(
    application_id: str,
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(application_id, "Invalid application ID")
    application = application_service.reject_applicant(parsed_id)
    return {
        "success": True,
        "message": "Applicant rejected successfully",
        "application": application,
    }


@router.get("/analytics/applications", response_model=schemas.ApplicationAnalytics)
def read_application_analytics(
    target_date: Optional[str] = Query(None, alias="date"),
    application_service: ApplicationService = Depends(get_application_service),
    admin: User = Depends(require_admin),
):
    """Daily counts for `date` (YYYY-MM-DD, UTC). Defaults to today."""
    if target_date is None:
        day = utc_today()
    else:
        day = parse_iso_date(target_date)
        if day is None:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    return application_service.get_application_analytics(day)
