"""
Account Service.

Local and federated sign-up / sign-in for candidates, local sign-up /
sign-in for employers. Candidates and employers are separate identity
spaces: the same email may exist once in each.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from careers.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ValidationError,
)
from careers.core.federated import VerifiedClaims
from careers.core.security import PasswordHasher
from careers.core.validators import require_text, sanitize_text
from careers.models import Candidate, Employer
from careers.models.candidate import AUTH_GOOGLE, AUTH_LOCAL

logger = logging.getLogger("careers.accounts")

INVALID_CREDENTIALS = "Invalid email or password."


class AccountService:
    def __init__(self, db: Session, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher

    # ============== Candidates ==============

    def get_candidate_by_email(self, email: str) -> Optional[Candidate]:
        return self.db.query(Candidate).filter(Candidate.email == email).first()

    def register_candidate(
        self,
        full_name: str,
        email: str,
        password: str,
        mobile_number: Optional[str] = None,
    ) -> Candidate:
        existing = self.get_candidate_by_email(email)
        if existing:
            if existing.is_federated:
                raise ConflictError(
                    "This email was used to sign up with Google. Please log in with Google."
                )
            raise ConflictError("Email already registered. Please log in.")

        candidate = Candidate(
            full_name=require_text(full_name, "Full name is required."),
            email=email,
            mobile_number=sanitize_text(mobile_number),
            password_hash=self.hasher.hash(password),
            auth_provider=AUTH_LOCAL,
        )
        self._insert(candidate, "Email already registered. Please log in.")
        logger.info("Candidate registered: %s", candidate.id)
        return candidate

    def authenticate_candidate(self, email: str, password: str) -> Candidate:
        candidate = self.get_candidate_by_email(email)
        if candidate is None or not candidate.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)

        if candidate.is_federated:
            raise AuthorizationError("This account was registered with Google. Please use Google to log in.")

        if not self.hasher.verify(password, candidate.password_hash):
            logger.warning("Failed candidate login for %s", candidate.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        logger.info("Candidate login: %s", candidate.id)
        return candidate

    def federated_sign_in(self, claims: VerifiedClaims) -> tuple[Candidate, bool]:
        """
        Sign in, or sign up, the candidate named by verified provider claims.

        Returns:
            The candidate and whether it was created by this call
        """
        existing = self.get_candidate_by_email(claims.email)
        if existing:
            if not existing.is_federated:
                raise AuthorizationError(
                    "This email is registered with password. Please use email/password login."
                )
            if existing.google_id and existing.google_id != claims.subject_id:
                raise AuthorizationError("This email is linked to a different Google account.")
            if not existing.is_active:
                raise AuthenticationError("This account has been deactivated.")
            logger.info("Federated login: %s", existing.id)
            return existing, False

        candidate = Candidate(
            full_name=sanitize_text(claims.display_name) or sanitize_text(claims.email.split("@")[0]),
            email=claims.email,
            google_id=claims.subject_id,
            profile_image_url=claims.avatar_url,
            auth_provider=AUTH_GOOGLE,
        )
        self._insert(candidate, "This email address is already registered.")
        logger.info("Federated signup: %s", candidate.id)
        return candidate, True

    def change_password(self, candidate: Candidate, current_password: str, new_password: str) -> None:
        if candidate.is_federated:
            raise AuthorizationError(
                "This account was registered with Google. Password update is not applicable."
            )
        if not self.hasher.verify(current_password, candidate.password_hash):
            raise AuthenticationError("Current password is incorrect.")
        if current_password == new_password:
            raise ValidationError("New password must differ from the current one.")

        candidate.password_hash = self.hasher.hash(new_password)
        self.db.commit()
        logger.info("Password changed for candidate %s", candidate.id)

    # ============== Employers ==============

    def get_employer_by_email(self, email: str) -> Optional[Employer]:
        return self.db.query(Employer).filter(Employer.email == email).first()

    def register_employer(
        self,
        company_name: str,
        email: str,
        password: str,
        website: Optional[str] = None,
        description: Optional[str] = None,
        contact_person: Optional[str] = None,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Employer:
        if self.get_employer_by_email(email):
            raise ConflictError("This email address is already registered.")

        employer = Employer(
            company_name=require_text(company_name, "Company name is required."),
            email=email,
            password_hash=self.hasher.hash(password),
            website=website,
            description=description,
            contact_person=sanitize_text(contact_person),
            contact_phone=contact_phone,
            address=address,
        )
        self._insert(employer, "This email address is already registered.")
        logger.info("Employer registered: %s", employer.id)
        return employer

    def authenticate_employer(self, email: str, password: str) -> Employer:
        employer = self.get_employer_by_email(email)
        if employer is None:
            logger.warning("Failed employer login for unknown account")
            raise AuthenticationError("Invalid credentials.")
        if not self.hasher.verify(password, employer.password_hash):
            logger.warning("Failed employer login for %s", employer.id)
            raise AuthenticationError("Invalid credentials.")

        logger.info("Employer login: %s", employer.id)
        return employer

    # ============== Helpers ==============

    def _insert(self, record, conflict_message: str) -> None:
        """Insert a principal; a lost race on the unique email is a conflict."""
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(conflict_message)
        self.db.refresh(record)
