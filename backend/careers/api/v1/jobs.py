"""
Jobs API endpoints.

Employers post and manage jobs; candidates browse active jobs and apply.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from careers.api.deps import get_application_service, get_job_store
from careers.api.guards import EmployerPrincipal, require_candidate, require_employer
from careers.models import Candidate
from careers.services import ApplicationSubmissionService, JobStore

router = APIRouter()


# ============== Pydantic Schemas ==============


class JobCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    skills: list[str] = []
    required_experience: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    salary_currency: Optional[str] = Field(default=None, max_length=10)


class JobResponse(BaseModel):
    id: str
    employer_id: str
    title: str
    description: str
    skills: list[str] = []
    required_experience: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobStatusUpdate(BaseModel):
    status: str


class ApplyRequest(BaseModel):
    cover_letter: Optional[str] = Field(default=None, max_length=10000)


class ApplyResponse(BaseModel):
    success: bool = True
    application_id: str


# ============== API Endpoints ==============


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def post_job(
    payload: JobCreate,
    current_employer: EmployerPrincipal = Depends(require_employer),
    jobs: JobStore = Depends(get_job_store),
):
    return jobs.create(current_employer.id, **payload.model_dump())


@router.get("", response_model=list[JobResponse])
def list_active_jobs(skill: Optional[str] = None, jobs: JobStore = Depends(get_job_store)):
    """Public job board: active jobs, newest first."""
    return jobs.search(skill=skill)


@router.get("/mine", response_model=list[JobResponse])
def list_my_jobs(
    current_employer: EmployerPrincipal = Depends(require_employer),
    jobs: JobStore = Depends(get_job_store),
):
    return jobs.list_for_employer(current_employer.id)


@router.patch("/{job_id}/status", response_model=JobResponse)
def set_job_status(
    job_id: str,
    payload: JobStatusUpdate,
    current_employer: EmployerPrincipal = Depends(require_employer),
    jobs: JobStore = Depends(get_job_store),
):
    return jobs.set_status(current_employer.id, job_id, payload.status)


@router.post("/{job_id}/apply", response_model=ApplyResponse, status_code=status.HTTP_201_CREATED)
def apply_to_job(
    job_id: str,
    payload: Optional[ApplyRequest] = None,
    current_candidate: Candidate = Depends(require_candidate),
    applications: ApplicationSubmissionService = Depends(get_application_service),
):
    """
    Apply the signed-in candidate to a job.

    The candidate's profile is snapshotted into the application.
    Applying twice to the same job returns 409.
    """
    cover_letter = payload.cover_letter if payload else None
    application_id = applications.apply(current_candidate.id, job_id, cover_letter=cover_letter)
    return ApplyResponse(application_id=application_id)
