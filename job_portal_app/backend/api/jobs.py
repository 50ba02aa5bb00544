"""
Job role endpoints plus the capability, band and status lookups.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from .. import schemas
from ..models.db.user import User
from ..repositories.job_repository import DEFAULT_JOB_SORT
from ..services.job_service import JobService
from ..utils.api_helpers import check_resource_exists, parse_positive_id
from .dependencies import get_job_service, require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/jobs", response_model=List[schemas.JobRole])
def list_jobs(
    sort_by: str = Query(DEFAULT_JOB_SORT, alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    job_service: JobService = Depends(get_job_service),
):
    """
    List job roles that have not been deleted.

    Unknown `sortBy` values fall back to role name; `sortOrder` is `asc` or `desc`.
    """
    return job_service.fetch_jobs(sort_by, sort_order, limit, offset)


# Fixed paths first so they are not captured by /jobs/{job_id}
@router.post("/jobs/auto-close", response_model=schemas.AutoCloseResult)
def auto_close_jobs(job_service: JobService = Depends(get_job_service)):
    """Run the auto-close sweep immediately."""
    return job_service.auto_close_expired_job_roles()


@router.post(
    "/jobs/job",
    response_model=schemas.JobRoleDetails,
    status_code=status.HTTP_201_CREATED,
)
def create_job(
    job: schemas.JobRoleCreate,
    job_service: JobService = Depends(get_job_service),
    admin: User = Depends(require_admin),
):
    created = job_service.add_job(job)
    if created is None:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Failed to create job role"},
        )
    logger.info("Admin %s created job role %s", admin.id, created.id)
    return created


@router.get("/jobs/{job_id}", response_model=schemas.JobRoleDetails)
def get_job(job_id: str, job_service: JobService = Depends(get_job_service)):
    parsed_id = parse_positive_id(job_id, "Invalid job ID")
    job = job_service.get_job_by_id(parsed_id)
    check_resource_exists(job, f"Job with ID {parsed_id} not found")
    return job


@router.put("/jobs/{job_id}", response_model=schemas.JobRoleDetails)
def update_job(
    job_id: str,
    patch: schemas.JobRoleUpdate,
    job_service: JobService = Depends(get_job_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(job_id, "Invalid job role ID")
    updated = job_service.update_job_role(parsed_id, patch)
    check_resource_exists(updated, "Job role not found")
    logger.info("Admin %s updated job role %s", admin.id, parsed_id)
    return updated


@router.delete("/jobs/{job_id}", response_model=schemas.MessageResponse)
def delete_job(
    job_id: str,
    job_service: JobService = Depends(get_job_service),
    admin: User = Depends(require_admin),
):
    parsed_id = parse_positive_id(job_id, "Job ID must be a valid number")
    check_resource_exists(job_service.get_job_by_id(parsed_id), f"Job with ID {parsed_id} not found")
    job_service.delete_job(parsed_id)
    logger.info("Admin %s deleted job role %s", admin.id, parsed_id)
    return {"success": True, "message": "Job role deleted successfully"}


@router.get("/capabilities", response_model=List[schemas.LookupItem])
def list_capabilities(job_service: JobService = Depends(get_job_service)):
    return job_service.get_capabilities()


@router.get("/bands", response_model=List[schemas.LookupItem])
def list_bands(job_service: JobService = Depends(get_job_service)):
    return job_service.get_bands()


@router.get("/statuses", response_model=List[schemas.LookupItem])
def list_statuses(job_service: JobService = Depends(get_job_service)):
    return job_service.get_statuses()
