"""
Reference data and sample content for a fresh database.

Each seeder checks whether its table already has rows and skips it if so,
which makes `seed_all` safe to call on every startup.
"""
import logging
from datetime import timedelta
from typing import Dict

from sqlalchemy.orm import Session

from ..config.settings import Settings
from ..models.db import crud
from ..models.db.job_role import CLOSED_STATUS, OPEN_STATUS, Band, Capability, JobAvailabilityStatus, JobRole
from ..models.db.user import User
from ..security import get_password_hash
from ..utils.validators import utc_today

logger = logging.getLogger(__name__)

STATUSES = [OPEN_STATUS, CLOSED_STATUS]

BANDS = [
    "Trainee",
    "Associate",
    "Consultant",
    "Senior Consultant",
    "Principal Consultant",
    "Managing Consultant",
    "Senior Manager",
    "Principal",
    "Director",
]

CAPABILITIES = [
    "Engineering",
    "Data & AI",
    "Digital Services",
    "Workday",
    "Testing",
    "DevOps",
    "Cyber Security",
    "Business Analysis",
    "Project Management",
    "Architecture",
    "UX/UI Design",
    "Platform Engineering",
    "Quality Assurance",
    "Cloud Solutions",
    "ServiceNow",
]

# (role, location, capability, band, days until closing, open positions)
SAMPLE_JOB_ROLES = [
    ("Software Engineer", "Belfast", "Engineering", "Associate", 30, 3),
    ("Software Engineer", "Birmingham", "Engineering", "Senior Consultant", 45, 2),
    ("Data Engineer", "London", "Data & AI", "Consultant", 25, 2),
    ("Data Scientist", "Manchester", "Data & AI", "Principal Consultant", 60, 1),
    ("Test Engineer", "Derry~Londonderry", "Testing", "Associate", 40, 2),
    ("DevOps Engineer", "Belfast", "DevOps", "Consultant", 35, 1),
    ("Security Architect", "London", "Cyber Security", "Principal", 90, 1),
]


def _seed_names(db: Session, model, names) -> int:
    if db.query(model).count() > 0:
        logger.info("%s already seeded. Skipping...", model.__tablename__)
        return 0
    db.add_all([model(name=name) for name in names])
    db.commit()
    logger.info("Seeded %d %s", len(names), model.__tablename__)
    return len(names)


def seed_statuses(db: Session) -> int:
    return _seed_names(db, JobAvailabilityStatus, STATUSES)


def seed_bands(db: Session) -> int:
    return _seed_names(db, Band, BANDS)


def seed_capabilities(db: Session) -> int:
    return _seed_names(db, Capability, CAPABILITIES)


def seed_admin_user(db: Session, settings: Settings) -> int:
    if db.query(User).count() > 0:
        logger.info("users already seeded. Skipping...")
        return 0
    crud.create_user(
        db,
        email=settings.admin_seed_email,
        hashed_password=get_password_hash(settings.admin_seed_password),
        role="admin",
    )
    logger.info("Seeded admin user %s", settings.admin_seed_email)
    return 1


def seed_job_roles(db: Session) -> int:
    if db.query(JobRole).count() > 0:
        logger.info("job_roles already seeded. Skipping...")
        return 0

    capabilities = {c.name: c.id for c in db.query(Capability).all()}
    bands = {b.name: b.id for b in db.query(Band).all()}
    open_status = db.query(JobAvailabilityStatus).filter(JobAvailabilityStatus.name == OPEN_STATUS).first()
    today = utc_today()

    for role_name, location, capability, band, days, positions in SAMPLE_JOB_ROLES:
        db.add(
            JobRole(
                role_name=role_name,
                location=location,
                capability_id=capabilities.get(capability),
                band_id=bands.get(band),
                status_id=open_status.id if open_status else None,
                closing_date=today + timedelta(days=days),
                description=f"Join our {capability} team in {location} as a {role_name}.",
                open_positions=positions,
                deleted=False,
            )
        )
    db.commit()
    logger.info("Seeded %d job roles", len(SAMPLE_JOB_ROLES))
    return len(SAMPLE_JOB_ROLES)


def seed_all(db: Session, settings: Settings, include_sample_jobs: bool = True) -> Dict[str, int]:
    results = {
        "statuses": seed_statuses(db),
        "bands": seed_bands(db),
        "capabilities": seed_capabilities(db),
        "users": seed_admin_user(db, settings),
    }
    if include_sample_jobs:
        results["job_roles"] = seed_job_roles(db)
    return results
