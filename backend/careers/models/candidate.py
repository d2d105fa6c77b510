import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, Text
from sqlalchemy.orm import relationship

from careers.core.security import PrincipalKind
from careers.db.base import Base

AUTH_LOCAL = "local"
AUTH_GOOGLE = "google"


class Candidate(Base):
    """Job seeker account and the live profile employers see when they apply."""

    __tablename__ = "candidates"

    kind = PrincipalKind.CANDIDATE

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)

    # 1. Credentials: exactly one origin per account
    auth_provider = Column(String(20), nullable=False, default=AUTH_LOCAL)  # 'local' | 'google'
    password_hash = Column(String(255), nullable=True)
    google_id = Column(String(255), unique=True, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    # 2. Personal details
    mobile_number = Column(String(20))
    gender = Column(String(20))
    profile_image_url = Column(String(500))
    experience_level = Column(String(50))
    ctc_expected = Column(Numeric(12, 2))
    resume_url = Column(String(500))

    # 3. Structured sections, stored serialized as JSON text
    # Example: skills = '["Python", "SQL"]'
    professional_details = Column(Text)
    projects = Column(Text)
    skills = Column(Text)
    education = Column(Text)
    certifications = Column(Text)
    languages = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    applications = relationship(
        "Application",
        back_populates="candidate",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def display_name(self) -> str:
        return self.full_name

    @property
    def is_federated(self) -> bool:
        return self.auth_provider != AUTH_LOCAL
