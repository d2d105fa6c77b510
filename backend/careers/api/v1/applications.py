"""
Applications API endpoints.

Employers read the snapshots submitted to their own jobs and move
applications through review; candidates list what they applied to.
"""

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from careers.api.deps import get_application_service
from careers.api.guards import EmployerPrincipal, require_candidate, require_employer
from careers.models import Candidate
from careers.services import ApplicationSubmissionService

router = APIRouter()


class ApplicationResponse(BaseModel):
    id: str
    job_id: str
    candidate_id: str
    employer_id: str
    status: str
    cover_letter: Optional[str] = None
    applied_at: Optional[datetime] = None
    profile_snapshot: dict[str, Any]

    class Config:
        from_attributes = True


class ApplicationList(BaseModel):
    total: int
    applications: list[ApplicationResponse]


class ApplicationStatusUpdate(BaseModel):
    status: str


@router.get("", response_model=ApplicationList)
def list_job_applications(
    job_id: Optional[str] = Query(default=None, alias="jobId"),
    current_employer: EmployerPrincipal = Depends(require_employer),
    applications: ApplicationSubmissionService = Depends(get_application_service),
):
    """Applications to one of the employer's jobs, newest first."""
    rows = applications.list_for_job(current_employer.id, job_id)
    return ApplicationList(
        total=len(rows),
        applications=[ApplicationResponse.model_validate(row) for row in rows],
    )


@router.get("/mine", response_model=ApplicationList)
def list_my_applications(
    current_candidate: Candidate = Depends(require_candidate),
    applications: ApplicationSubmissionService = Depends(get_application_service),
):
    rows = applications.list_for_candidate(current_candidate.id)
    return ApplicationList(
        total=len(rows),
        applications=[ApplicationResponse.model_validate(row) for row in rows],
    )


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    current_employer: EmployerPrincipal = Depends(require_employer),
    applications: ApplicationSubmissionService = Depends(get_application_service),
):
    return applications.update_status(current_employer.id, application_id, payload.status)
