"""
Access guards for candidate-only and employer-only routes.

Each request moves through the same steps, in order, and stops at the
first failure:

    extract token -> verify & decode -> check kind -> attach principal

Missing, forged and expired tokens are 401; a valid token of the other
kind is 403. The candidate guard reloads the candidate row on every
request so profile edits and deactivation take effect immediately. The
employer guard trusts the signed claims and skips the lookup.
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from careers.core.errors import AuthenticationError, AuthorizationError
from careers.core.security import PrincipalKind, SessionClaims
from careers.db.session import get_db
from careers.models import Candidate

logger = logging.getLogger("careers.guards")


@dataclass(frozen=True)
class EmployerPrincipal:
    """Employer identity as carried by the session token."""

    id: str
    email: str
    company_name: str
    kind: PrincipalKind = PrincipalKind.EMPLOYER

    @property
    def display_name(self) -> str:
        return self.company_name


class AccessGuard:
    def __init__(self, expected_kind: PrincipalKind):
        self.expected_kind = expected_kind

    def __call__(self, request: Request, db: Session = Depends(get_db)) -> Any:
        token = request.app.state.token_transport.extract(request)
        if not token:
            raise AuthenticationError("Not authorized, no token.")

        claims = request.app.state.token_issuer.decode(token)

        if claims.kind != self.expected_kind:
            logger.warning(
                "Rejected %s token on %s route %s",
                claims.kind.value,
                self.expected_kind.value,
                request.url.path,
            )
            raise AuthorizationError(f"Forbidden: Not a {self.expected_kind.value} token.")

        principal = self.load_principal(claims, db)
        request.state.principal = principal
        return principal

    def load_principal(self, claims: SessionClaims, db: Session) -> Any:
        raise NotImplementedError


class CandidateGuard(AccessGuard):
    def __init__(self):
        super().__init__(PrincipalKind.CANDIDATE)

    def load_principal(self, claims: SessionClaims, db: Session) -> Candidate:
        candidate = db.get(Candidate, claims.subject_id)
        if candidate is None or not candidate.is_active:
            raise AuthenticationError("Not authorized, account is no longer active.")
        return candidate


class EmployerGuard(AccessGuard):
    def __init__(self):
        super().__init__(PrincipalKind.EMPLOYER)

    def load_principal(self, claims: SessionClaims, db: Session) -> EmployerPrincipal:
        return EmployerPrincipal(
            id=claims.subject_id,
            email=claims.email,
            company_name=claims.name or "",
        )


require_candidate = CandidateGuard()
require_employer = EmployerGuard()
