"""FastAPI dependencies: services, auth guards and the scheduler registry."""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..models.db.database import get_db
from ..models.db.user import User
from ..repositories.application_repository import ApplicationRepository
from ..repositories.job_repository import JobRepository
from ..services.application_service import ApplicationService
from ..services.auth_service import AuthService
from ..services.job_service import JobService
from ..services.scheduler_service import SchedulerService
from ..utils.errors import ForbiddenError, UnauthorizedError

bearer_scheme = HTTPBearer(scheme_name="Bearer", auto_error=False)


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    return JobService(JobRepository(db))


def get_application_service(db: Session = Depends(get_db)) -> ApplicationService:
    return ApplicationService(ApplicationRepository(db), JobRepository(db))


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("No token provided")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    return auth_service.authenticate(token)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required. You do not have permission to access this resource.")
    return current_user


def get_scheduler(request: Request) -> SchedulerService:
    return request.app.state.scheduler
