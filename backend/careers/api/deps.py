"""
Shared FastAPI dependencies.

Security components live on ``app.state`` (built once by the app factory);
services are built per request around the request's database session.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from careers.core.federated import FederatedIdentityVerifier
from careers.core.security import PasswordHasher, TokenIssuer
from careers.core.transport import TokenTransport
from careers.db.session import get_db
from careers.services import AccountService, ApplicationSubmissionService, JobStore


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_transport(request: Request) -> TokenTransport:
    return request.app.state.token_transport


def get_federated_verifier(request: Request) -> FederatedIdentityVerifier:
    return request.app.state.federated_verifier


def get_account_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_hasher),
) -> AccountService:
    return AccountService(db, hasher)


def get_application_service(db: Session = Depends(get_db)) -> ApplicationSubmissionService:
    return ApplicationSubmissionService(db)


def get_job_store(db: Session = Depends(get_db)) -> JobStore:
    return JobStore(db)
