"""
Profile Snapshot Builder.

Freezes a candidate's live profile into the document stored on an
application. Stored sections are JSON text written by older clients too,
so each one is parsed on its own: a broken section becomes empty instead
of failing the whole snapshot. The credential hash is never copied.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from careers.models import Candidate

logger = logging.getLogger("careers.snapshot")

LIST_SECTIONS = ("professional_details", "projects", "skills", "education", "certifications", "languages")


class PersonalDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_name: str
    email: str
    mobile_number: Optional[str] = None
    gender: Optional[str] = None
    profile_image_url: Optional[str] = None


class ProfileSnapshot(BaseModel):
    """What the employer sees, as it was at the moment of applying."""

    model_config = ConfigDict(frozen=True)

    candidate_id: str
    personal: PersonalDetails
    experience_level: Optional[str] = None
    professional_details: list[Any] = Field(default_factory=list)
    projects: list[Any] = Field(default_factory=list)
    skills: list[Any] = Field(default_factory=list)
    education: list[Any] = Field(default_factory=list)
    certifications: list[Any] = Field(default_factory=list)
    languages: list[Any] = Field(default_factory=list)
    resume_url: Optional[str] = None
    ctc_expected: Optional[float] = None


def parse_section(raw: Any, section: str = "section") -> list[Any]:
    """
    Decode one stored section into a list.

    A single object is treated as a one-entry list; anything unreadable
    degrades to an empty list.
    """
    if raw is None or raw == "":
        return []

    value = raw
    if isinstance(raw, (str, bytes)):
        try:
            value = json.loads(raw)
        except (ValueError, TypeError):
            logger.warning("Discarding malformed %s in profile snapshot", section)
            return []

    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]

    logger.warning("Discarding %s of unexpected type %s", section, type(value).__name__)
    return []


def parse_amount(raw: Any) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        return float(Decimal(str(raw)))
    except (InvalidOperation, ValueError):
        return None


def build_profile_snapshot(candidate: Candidate) -> ProfileSnapshot:
    """Project a live candidate row into an immutable snapshot."""
    sections = {name: parse_section(getattr(candidate, name, None), name) for name in LIST_SECTIONS}

    return ProfileSnapshot(
        candidate_id=candidate.id,
        personal=PersonalDetails(
            full_name=candidate.full_name or "",
            email=candidate.email,
            mobile_number=candidate.mobile_number,
            gender=candidate.gender,
            profile_image_url=candidate.profile_image_url,
        ),
        experience_level=candidate.experience_level,
        resume_url=candidate.resume_url,
        ctc_expected=parse_amount(candidate.ctc_expected),
        **sections,
    )
