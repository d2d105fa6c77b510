import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from careers.core.security import PrincipalKind
from careers.db.base import Base


class Employer(Base):
    """Company account. Employers always sign in with a local password."""

    __tablename__ = "employers"

    kind = PrincipalKind.EMPLOYER

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=False)

    website = Column(String(255))
    description = Column(Text)
    logo_url = Column(String(500))
    contact_person = Column(String(255))
    contact_phone = Column(String(50))
    address = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    jobs = relationship(
        "Job",
        back_populates="employer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def display_name(self) -> str:
        return self.company_name
