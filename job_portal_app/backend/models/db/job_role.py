from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .database import Base

OPEN_STATUS = "Open"
CLOSED_STATUS = "Closed"


class Capability(Base):
    __tablename__ = "capabilities"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)


class Band(Base):
    __tablename__ = "bands"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)


class JobAvailabilityStatus(Base):
    __tablename__ = "job_availability_status"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)


class JobRole(Base):
    __tablename__ = "job_roles"

    id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    capability_id = Column(Integer, ForeignKey("capabilities.id"), nullable=True)
    band_id = Column(Integer, ForeignKey("bands.id"), nullable=True)
    status_id = Column(Integer, ForeignKey("job_availability_status.id"), nullable=True)
    closing_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    responsibilities = Column(Text, nullable=True)
    job_spec_url = Column(String, nullable=True)
    open_positions = Column(Integer, nullable=False, default=1)
    deleted = Column(Boolean, nullable=False, default=False, index=True)

    capability = relationship("Capability", lazy="joined")
    band = relationship("Band", lazy="joined")
    status = relationship("JobAvailabilityStatus", lazy="joined")
    applications = relationship("Application", back_populates="job_role")

    @property
    def capability_name(self):
        return self.capability.name if self.capability else None

    @property
    def band_name(self):
        return self.band.name if self.band else None

    @property
    def status_name(self):
        return self.status.name if self.status else None

    @property
    def is_open(self) -> bool:
        return self.status_name == OPEN_STATUS
