from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from ...utils.validators import utc_now
from .database import Base

PENDING = "Pending"
REVIEWED = "Reviewed"
ACCEPTED = "Accepted"
REJECTED = "Rejected"
HIRED = "Hired"

# Hired is only reachable through the hire flow
ADMIN_SETTABLE_STATUSES = [PENDING, REVIEWED, ACCEPTED, REJECTED]
HIREABLE_STATUSES = [PENDING, REVIEWED]
# nothing moves an application out of these
FINAL_STATUSES = [HIRED, REJECTED]


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    job_role_id = Column(Integer, ForeignKey("job_roles.id"), nullable=False, index=True)
    phone_number = Column(String, nullable=False)
    email_address = Column(String, nullable=False, index=True)
    status = Column(String, nullable=False, default=PENDING)
    cover_letter = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now)

    job_role = relationship("JobRole", back_populates="applications")

    @property
    def job_role_name(self):
        return self.job_role.role_name if self.job_role else None

    @property
    def job_role_location(self):
        return self.job_role.location if self.job_role else None
