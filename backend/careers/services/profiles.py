import json
from typing import Any

from sqlalchemy.orm import Session

from careers.core.validators import require_text, sanitize_text
from careers.models import Candidate
from careers.services.snapshot import LIST_SECTIONS, parse_section

PERSONAL_FIELDS = ("full_name", "mobile_number", "gender", "experience_level", "ctc_expected", "resume_url")
SANITIZED_FIELDS = ("full_name", "gender", "experience_level")


def profile_view(candidate: Candidate) -> dict[str, Any]:
    """Live profile as returned to its owner; the password hash never leaves."""
    view: dict[str, Any] = {
        "id": candidate.id,
        "email": candidate.email,
        "auth_provider": candidate.auth_provider,
        "profile_image_url": candidate.profile_image_url,
    }
    for field in PERSONAL_FIELDS:
        value = getattr(candidate, field)
        view[field] = float(value) if field == "ctc_expected" and value is not None else value
    for section in LIST_SECTIONS:
        view[section] = parse_section(getattr(candidate, section), section)
    return view


def update_profile(db: Session, candidate: Candidate, changes: dict[str, Any]) -> Candidate:
    """
    Apply a partial update; sections are stored serialized.

    Only keys present in ``changes`` are touched. An explicit None clears
    the field, except the name, which is mandatory.
    """
    for field in PERSONAL_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        if field == "full_name":
            value = require_text(value, "Full name is required.")
        elif field in SANITIZED_FIELDS:
            value = sanitize_text(value)
        setattr(candidate, field, value)

    for section in LIST_SECTIONS:
        if section in changes:
            value = changes[section]
            setattr(candidate, section, json.dumps(value) if value is not None else None)

    db.commit()
    db.refresh(candidate)
    return candidate
