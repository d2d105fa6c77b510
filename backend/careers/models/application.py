import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from careers.db.base import Base

STATUS_APPLIED = "applied"
STATUS_SHORTLISTED = "shortlisted"
STATUS_REJECTED = "rejected"
STATUS_HIRED = "hired"
APPLICATION_STATUSES = (STATUS_APPLIED, STATUS_SHORTLISTED, STATUS_REJECTED, STATUS_HIRED)


class Application(Base):
    """
    A candidate's application to one job.

    ``profile_snapshot`` is the profile as it was when the candidate
    applied and is never rewritten. ``employer_id`` is copied from the job.
    """

    __tablename__ = "applications"
    __table_args__ = (
        # One application per candidate per job, whatever the request timing
        UniqueConstraint("job_id", "candidate_id", name="uq_application_job_candidate"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), index=True, nullable=False)
    candidate_id = Column(
        String(36),
        ForeignKey("candidates.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    employer_id = Column(String(36), index=True, nullable=False)

    status = Column(String(20), nullable=False, default=STATUS_APPLIED)
    cover_letter = Column(Text)
    profile_snapshot = Column(JSON, nullable=False)

    applied_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    job = relationship("Job", back_populates="applications")
    candidate = relationship("Candidate", back_populates="applications")
