"""
Authentication API endpoints.

Candidate registration and login (local and Google), logout for any
principal, and the candidate's own account endpoints. Every successful
sign-in returns the session token in the body and sets it as a cookie.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field, field_validator

from careers.api.deps import (
    get_account_service,
    get_federated_verifier,
    get_token_issuer,
    get_transport,
)
from careers.api.guards import require_candidate
from careers.core.errors import AuthenticationError, ValidationError
from careers.core.federated import FederatedIdentityVerifier
from careers.core.security import PrincipalKind, TokenIssuer, TokenSubject
from careers.core.transport import TokenTransport
from careers.core.validators import normalize_email
from careers.models import Candidate
from careers.services import AccountService

router = APIRouter()


# ============== Pydantic Schemas ==============


class CandidateRegister(BaseModel):
    """Schema for local candidate registration."""

    full_name: str = Field(..., min_length=1, max_length=255)
    email: str
    password: str = Field(..., min_length=8, max_length=72)
    mobile_number: Optional[str] = Field(default=None, max_length=20)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class LoginRequest(BaseModel):
    """Schema for email/password login (candidates and employers)."""

    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class FederatedLoginRequest(BaseModel):
    """Identity assertion (Google ID token) from a client SDK."""

    token: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)


class PrincipalResponse(BaseModel):
    id: str
    email: str
    name: str
    kind: PrincipalKind
    profile_image_url: Optional[str] = None


class SessionResponse(BaseModel):
    """Token in the body for header-based clients; the cookie carries a copy."""

    success: bool = True
    message: str
    token: str
    token_type: str = "bearer"
    principal: PrincipalResponse


class CandidateResponse(BaseModel):
    id: str
    email: str
    full_name: str
    auth_provider: str
    mobile_number: Optional[str] = None
    profile_image_url: Optional[str] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


# ============== Helper Functions ==============


def start_session(
    principal: TokenSubject,
    response: Response,
    issuer: TokenIssuer,
    transport: TokenTransport,
    message: str,
) -> SessionResponse:
    """Issue a token for the principal and emit it through both transports."""
    token = issuer.issue(principal)
    transport.attach(response, token, issuer.lifetime(principal.kind))

    return SessionResponse(
        message=message,
        token=token,
        principal=PrincipalResponse(
            id=principal.id,
            email=principal.email,
            name=principal.display_name,
            kind=principal.kind,
            profile_image_url=getattr(principal, "profile_image_url", None),
        ),
    )


# ============== API Endpoints ==============


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: CandidateRegister,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    transport: TokenTransport = Depends(get_transport),
):
    """
    Register a new candidate with email and password.

    The new account is signed in straight away.
    """
    candidate = accounts.register_candidate(
        full_name=payload.full_name,
        email=payload.email,
        password=payload.password,
        mobile_number=payload.mobile_number,
    )
    return start_session(candidate, response, issuer, transport, "Registration successful!")


@router.post("/login", response_model=SessionResponse)
def login(
    payload: LoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
    transport: TokenTransport = Depends(get_transport),
):
    """Login a locally registered candidate."""
    candidate = accounts.authenticate_candidate(payload.email, payload.password)
    return start_session(candidate, response, issuer, transport, "Login successful!")


@router.post("/federated", response_model=SessionResponse)
def federated_login(
    payload: FederatedLoginRequest,
    response: Response,
    accounts: AccountService = Depends(get_account_service),
    verifier: FederatedIdentityVerifier = Depends(get_federated_verifier),
    issuer: TokenIssuer = Depends(get_token_issuer),
    transport: TokenTransport = Depends(get_transport),
):
    """
    Sign in or sign up with a Google ID token.

    Returns 201 when the account was created by this call, 200 otherwise.
    """
    assertion = (payload.token or "").strip()
    if not assertion:
        raise ValidationError("Google token required.")

    claims = verifier.verify(assertion)
    if claims is None:
        raise AuthenticationError("Invalid Google token.")

    candidate, created = accounts.federated_sign_in(claims)
    if created:
        response.status_code = status.HTTP_201_CREATED
        message = "Account created successfully with Google!"
    else:
        message = "Login successful with Google!"
    return start_session(candidate, response, issuer, transport, message)


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response, transport: TokenTransport = Depends(get_transport)):
    """
    Clear the session cookie.

    Header-held tokens cannot be revoked server-side; clients drop them.
    """
    transport.clear(response)
    return MessageResponse(message="Logged out successfully.")


@router.get("/me", response_model=CandidateResponse)
def get_me(current_candidate: Candidate = Depends(require_candidate)):
    """Get the signed-in candidate's account."""
    return current_candidate


@router.post("/password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    current_candidate: Candidate = Depends(require_candidate),
    accounts: AccountService = Depends(get_account_service),
):
    """Change a local candidate's password; the current one is required."""
    accounts.change_password(current_candidate, payload.current_password, payload.new_password)
    return MessageResponse(message="Password updated successfully.")
