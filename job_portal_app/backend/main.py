from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .api import admin, application, auth, health, jobs
from .models.db.database import Base, SessionLocal, engine
from .models.db import application as application_model
from .models.db import job_role as job_role_model
from .models.db import user as user_model
from .services.scheduler_service import SchedulerService
from .services.seed_service import seed_all
from .utils.errors import AppError
from .utils.logging_config import setup_logging, get_logger
from .config.settings import get_settings

# Initialize settings
settings = get_settings()

# Setup logging configuration
setup_logging(
    level=settings.log_level,
    log_file=settings.log_file,
    fmt=settings.log_format,
    datefmt=settings.log_date_format,
)
logger = get_logger(__name__)

# Validate configuration on startup
missing_settings = settings.validate_required_settings()
if missing_settings:
    for setting in missing_settings:
        logger.error("Configuration error: %s", setting)
    if settings.is_production():
        raise RuntimeError("Invalid configuration for production environment")

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs" if settings.api_docs_enabled else None,
    redoc_url="/redoc" if settings.api_docs_enabled else None,
)
app.state.scheduler = SchedulerService(
    SessionLocal,
    cron_expression=settings.auto_close_cron_schedule,
    timezone_name=settings.scheduler_timezone,
)

# Add CORS middleware if enabled
if settings.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Bad request", "message": details or "Invalid request"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "message": "A database error occurred"},
    )


# Routers
app.include_router(health.router, tags=["Health Check"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(jobs.router, tags=["Job Roles"])
app.include_router(application.router, tags=["Applications"])
app.include_router(admin.router, prefix="/admin", tags=["Scheduler Administration"])


@app.on_event("startup")
def on_startup():
    """Create tables, seed reference data and start the scheduled tasks."""
    logger.info("Starting %s v%s (%s)...", settings.app_name, settings.app_version, settings.environment)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables initialized successfully")

    if settings.seed_on_startup:
        db = SessionLocal()
        try:
            seeded = seed_all(db, settings, include_sample_jobs=not settings.is_production())
            logger.info("Seed results: %s", seeded)
        finally:
            db.close()

    if settings.scheduler_enabled:
        app.state.scheduler.initialize()


@app.on_event("shutdown")
def on_shutdown():
    app.state.scheduler.destroy()
    logger.info("Shutdown complete")


@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.app_name} API"}
