"""
Employer API endpoints.

Employers sign up and sign in with a local password only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field, field_validator

from careers.api.deps import get_account_service, get_token_issuer, get_transport
from careers.api.guards import EmployerPrincipal, require_employer
from careers.api.v1.auth import LoginRequest, SessionResponse, start_session
from careers.core.security import TokenIssuer
from careers.core.transport import TokenTransport
from careers.core.validators import normalize_email
from careers.services import AccountService

router = APIRouter()


class EmployerRegister(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    email: str
    password: str = Field(..., min_length=8, max_length=72)
    website: Optional[str] = None
    description: Optional[str] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class EmployerIdentity(BaseModel):
    id: str
    email: str
    company_name: str


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register_employer(
    payload: EmployerRegister,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    transport: TokenTransport = Depends(get_transport),
):
    employer = accounts.register_employer(**payload.model_dump())
    return start_session(employer, response, issuer, transport, "Registration successful!")


@router.post("/login", response_model=SessionResponse)
def login_employer(
    payload: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    transport: TokenTransport = Depends(get_transport),
):
    employer = accounts.authenticate_employer(payload.email, payload.password)
    return start_session(employer, response, issuer, transport, "Login successful!")


@router.get("/me", response_model=EmployerIdentity)
def get_me(current_employer: EmployerPrincipal = Depends(require_employer)):
    """Employer identity straight from the token claims."""
    return EmployerIdentity(
        id=current_employer.id,
        email=current_employer.email,
        company_name=current_employer.company_name,
    )
