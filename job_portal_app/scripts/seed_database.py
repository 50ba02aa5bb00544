"""
Create the database tables and load reference data.

    python job_portal_app/scripts/seed_database.py [--no-sample-jobs] [--auto-close]
"""
import argparse
import logging
import os
import sys

from dotenv import load_dotenv

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

load_dotenv()

from backend.config.settings import get_settings
from backend.models.db.database import Base, SessionLocal, engine
from backend.models.db import application, job_role, user  # noqa: F401  registers tables
from backend.repositories.job_repository import JobRepository
from backend.services.job_service import JobService
from backend.services.seed_service import seed_all
from backend.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Seed the Job Portal database")
    parser.add_argument("--no-sample-jobs", action="store_true", help="Skip the sample job roles")
    parser.add_argument("--auto-close", action="store_true", help="Run the auto-close sweep after seeding")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    logger.info("Creating tables on %s", settings.get_database_url())
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        results = seed_all(db, settings, include_sample_jobs=not args.no_sample_jobs)
        for table, count in results.items():
            logger.info("%-12s %d row(s) inserted", table, count)

        if args.auto_close:
            result = JobService(JobRepository(db)).auto_close_expired_job_roles()
            logger.info(result["message"])
    except Exception:
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()

    logger.info("Database seeding completed")


if __name__ == "__main__":
    main()
