import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from careers.db.base import Base

JOB_ACTIVE = "active"
JOB_INACTIVE = "inactive"
JOB_STATUSES = (JOB_ACTIVE, JOB_INACTIVE)


class Job(Base):
    """Posting owned by exactly one employer."""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    employer_id = Column(
        String(36),
        ForeignKey("employers.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    skills = Column(JSON, default=list)  # ["Python", "FastAPI"]
    required_experience = Column(String(255))

    # Location and compensation
    city = Column(String(100))
    state = Column(String(100))
    country = Column(String(100))
    salary_min = Column(Integer)
    salary_max = Column(Integer)
    salary_currency = Column(String(10))

    status = Column(String(20), nullable=False, default=JOB_ACTIVE)  # 'active' | 'inactive'
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    employer = relationship("Employer", back_populates="jobs")
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
