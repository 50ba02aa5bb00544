from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON uses camelCase, Python uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# Lookup Schemas
class LookupItem(CamelModel):
    id: int
    name: str


# Job Role Schemas
class JobRoleCreate(CamelModel):
    # Required fields are checked by JobService so the caller gets a named reason
    role_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("roleName", "name", "role_name"))
    location: Optional[str] = None
    capability_id: Optional[int] = None
    band_id: Optional[int] = None
    closing_date: Optional[str] = Field(default=None, examples=["2030-01-31"])
    status_id: Optional[int] = None
    description: Optional[str] = None
    responsibilities: Optional[str] = None
    job_spec_url: Optional[str] = None
    open_positions: Optional[int] = None


class JobRoleUpdate(CamelModel):
    """Partial update. Only fields present in the request body are applied."""
    role_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("roleName", "name", "role_name"))
    location: Optional[str] = None
    capability_id: Optional[int] = None
    band_id: Optional[int] = None
    closing_date: Optional[str] = None
    description: Optional[str] = None
    responsibilities: Optional[str] = None
    job_spec_url: Optional[str] = None
    status_id: Optional[int] = None
    open_positions: Optional[int] = None


class JobRole(CamelModel):
    id: int
    role_name: str
    location: str
    closing_date: date
    capability_id: Optional[int] = None
    capability_name: Optional[str] = None
    band_id: Optional[int] = None
    band_name: Optional[str] = None
    status_id: Optional[int] = None
    status_name: Optional[str] = None
    open_positions: int


class JobRoleDetails(JobRole):
    description: Optional[str] = None
    responsibilities: Optional[str] = None
    job_spec_url: Optional[str] = None


class AutoCloseResult(CamelModel):
    closed_count: int
    message: str


class MessageResponse(BaseModel):
    success: bool
    message: str


# Application Schemas
class ApplicationCreate(CamelModel):
    job_role_id: Optional[int] = None
    phone_number: Optional[str] = None
    email_address: Optional[str] = None
    cover_letter: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("phone_number", mode="before")
    @classmethod
    def phone_number_as_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class Application(CamelModel):
    application_id: int = Field(alias="applicationID", validation_alias=AliasChoices("id", "applicationID"))
    job_role_id: int
    phone_number: str
    email_address: str
    status: str
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ApplicationWithJobRole(Application):
    job_role_name: Optional[str] = None
    job_role_location: Optional[str] = None


class ApplicationSubmissionResult(CamelModel):
    success: bool
    application_id: Optional[int] = Field(default=None, alias="applicationID")
    message: str


class ApplicationStatusUpdate(CamelModel):
    status: Optional[str] = Field(default=None, examples=["Reviewed"])


class ApplicationStatusResponse(CamelModel):
    success: bool
    message: str
    application: Application


class ApplicationHireResponse(ApplicationStatusResponse):
    job_role: Optional[JobRoleDetails] = None


class ApplicationAnalytics(CamelModel):
    target_date: date = Field(alias="date")
    applications_created_today: int
    applications_hired_today: int
    applications_rejected_today: int
    applications_accepted_today: int
    total_applications_today: int


# Auth Schemas
class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class User(CamelModel):
    id: int
    email: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    message: str
    user: User
    token: str


class ProfileResponse(BaseModel):
    user: User


# Scheduler Schemas
class ScheduledTaskStatus(CamelModel):
    name: str
    cron_expression: str
    running: bool
    next_run_time: Optional[datetime] = None


class SchedulerStatusResponse(BaseModel):
    success: bool
    data: dict
