"""
Candidate profile endpoints.

Edits here change the live profile only; snapshots already stored on
applications keep what the employer saw at the time.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from careers.api.guards import require_candidate
from careers.db.session import get_db
from careers.models import Candidate
from careers.services.profiles import profile_view, update_profile

router = APIRouter()


class ProfileUpdate(BaseModel):
    """Partial update; omitted fields are left untouched, explicit nulls clear them."""

    full_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    mobile_number: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=20)
    experience_level: Optional[str] = Field(default=None, max_length=50)
    ctc_expected: Optional[float] = Field(default=None, ge=0, le=9_999_999_999.99, allow_inf_nan=False)
    resume_url: Optional[str] = Field(default=None, max_length=500)

    professional_details: Optional[list[Any]] = None
    projects: Optional[list[Any]] = None
    skills: Optional[list[Any]] = None
    education: Optional[list[Any]] = None
    certifications: Optional[list[Any]] = None
    languages: Optional[list[Any]] = None


@router.get("")
def get_profile(current_candidate: Candidate = Depends(require_candidate)) -> dict[str, Any]:
    return profile_view(current_candidate)


@router.patch("")
def patch_profile(
    payload: ProfileUpdate,
    current_candidate: Candidate = Depends(require_candidate),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    candidate = update_profile(db, current_candidate, payload.model_dump(exclude_unset=True))
    return profile_view(candidate)
