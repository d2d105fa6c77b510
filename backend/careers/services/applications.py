"""
Application Submission Service.

A candidate may apply to a job once. The lookup before insert is only a
fast path; the unique (job_id, candidate_id) constraint decides races, and
losing one is reported as the same conflict as a plain repeat.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from careers.core.errors import (
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from careers.models import Application, Candidate, Job
from careers.models.application import APPLICATION_STATUSES, STATUS_APPLIED
from careers.models.job import JOB_ACTIVE
from careers.services.snapshot import build_profile_snapshot

logger = logging.getLogger("careers.applications")

ALREADY_APPLIED = "You have already applied to this job."


class ApplicationSubmissionService:
    def __init__(self, db: Session):
        self.db = db

    def find_existing(self, job_id: str, candidate_id: str) -> Optional[Application]:
        return (
            self.db.query(Application)
            .filter(Application.job_id == job_id, Application.candidate_id == candidate_id)
            .first()
        )

    def apply(self, candidate_id: str, job_id: Optional[str], cover_letter: Optional[str] = None) -> str:
        """
        Submit an application for the candidate to the job.

        Returns:
            The new application id

        Raises:
            ValidationError: no job id
            ConflictError: the candidate already applied to this job
            NotFoundError: the candidate profile or an active job is missing
        """
        job_id = (job_id or "").strip()
        if not job_id:
            raise ValidationError("Job id is required.")

        if self.find_existing(job_id, candidate_id):
            raise ConflictError(ALREADY_APPLIED)

        candidate = self.db.get(Candidate, candidate_id)
        if candidate is None:
            raise NotFoundError("Candidate profile not found.")

        job = self.db.get(Job, job_id)
        if job is None or job.status != JOB_ACTIVE:
            raise NotFoundError("Job not found.")

        # Built before anything is written: a failure here leaves no row behind
        snapshot = build_profile_snapshot(candidate)

        application = Application(
            job_id=job.id,
            candidate_id=candidate.id,
            employer_id=job.employer_id,
            status=STATUS_APPLIED,
            cover_letter=cover_letter,
            applied_at=datetime.utcnow(),
            profile_snapshot=snapshot.model_dump(mode="json"),
        )
        self.db.add(application)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if self.find_existing(job_id, candidate_id):
                logger.info("Concurrent duplicate application for job %s by %s", job_id, candidate_id)
                raise ConflictError(ALREADY_APPLIED)
            raise InternalError(f"Could not store application for job {job_id}: {exc.orig}") from exc

        logger.info("Application %s submitted for job %s by %s", application.id, job_id, candidate_id)
        return application.id

    def list_for_job(self, employer_id: str, job_id: Optional[str]) -> list[Application]:
        """Applications to one job, visible only to the employer who owns it."""
        job_id = (job_id or "").strip()
        if not job_id:
            raise ValidationError("jobId query parameter is required.")

        job = self.db.get(Job, job_id)
        if job is None:
            raise NotFoundError("Job not found.")
        if job.employer_id != employer_id:
            raise AuthorizationError("Forbidden: You can only view applications to your own jobs.")

        return (
            self.db.query(Application)
            .filter(Application.job_id == job_id)
            .order_by(Application.applied_at.desc())
            .all()
        )

    def list_for_candidate(self, candidate_id: str) -> list[Application]:
        return (
            self.db.query(Application)
            .filter(Application.candidate_id == candidate_id)
            .order_by(Application.applied_at.desc())
            .all()
        )

    def update_status(self, employer_id: str, application_id: str, new_status: str) -> Application:
        if new_status not in APPLICATION_STATUSES:
            raise ValidationError(f"Status must be one of: {', '.join(APPLICATION_STATUSES)}")

        application = self.db.get(Application, application_id)
        if application is None:
            raise NotFoundError("Application not found.")
        if application.employer_id != employer_id:
            raise AuthorizationError("Forbidden: This application belongs to another employer.")

        application.status = new_status
        self.db.commit()
        logger.info("Application %s moved to %s", application.id, new_status)
        return application
