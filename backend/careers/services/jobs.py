"""
Job Store.

Just enough of the posting side for candidates to have something to apply
to: employers post and toggle their jobs, everyone browses active ones.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from careers.core.errors import AuthorizationError, NotFoundError, ValidationError
from careers.models import Job
from careers.models.job import JOB_ACTIVE, JOB_STATUSES

logger = logging.getLogger("careers.jobs")


class JobStore:
    def __init__(self, db: Session):
        self.db = db

    def create(self, employer_id: str, **fields: Any) -> Job:
        job = Job(employer_id=employer_id, status=JOB_ACTIVE, **fields)
        self.db.add(job)
        self.db.commit()
        self.db.refresh(job)
        logger.info("Job %s posted by employer %s", job.id, employer_id)
        return job

    def search(self, skill: Optional[str] = None) -> list[Job]:
        """Active jobs, newest first, optionally narrowed to one skill."""
        jobs = (
            self.db.query(Job)
            .filter(Job.status == JOB_ACTIVE)
            .order_by(Job.created_at.desc())
            .all()
        )
        if not skill:
            return jobs

        wanted = skill.strip().lower()
        return [job for job in jobs if any(str(s).lower() == wanted for s in job.skills or [])]

    def list_for_employer(self, employer_id: str) -> list[Job]:
        return (
            self.db.query(Job)
            .filter(Job.employer_id == employer_id)
            .order_by(Job.created_at.desc())
            .all()
        )

    def set_status(self, employer_id: str, job_id: str, new_status: str) -> Job:
        if new_status not in JOB_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(JOB_STATUSES)}")

        job = self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found.")
        if job.employer_id != employer_id:
            raise AuthorizationError("Forbidden: You can only manage your own company's jobs.")

        job.status = new_status
        self.db.commit()
        return job
