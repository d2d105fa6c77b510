"""
Security utilities for authentication and authorization.

Provides password hashing (bcrypt) and session token management (JWT).
"""

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from passlib.context import CryptContext

from careers.core.config import Settings
from careers.core.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger("careers.security")


class PrincipalKind(str, enum.Enum):
    CANDIDATE = "candidate"
    EMPLOYER = "employer"


class TokenSubject(Protocol):
    """Anything a session token can be minted for."""

    id: str
    email: str
    kind: PrincipalKind

    @property
    def display_name(self) -> str: ...


@dataclass(frozen=True)
class SessionClaims:
    """Decoded, verified contents of a session token."""

    subject_id: str
    email: str
    kind: PrincipalKind
    name: Optional[str]
    issued_at: datetime
    expires_at: datetime


class PasswordHasher:
    """Salted, work-factor based hashing of local account secrets."""

    def __init__(self, rounds: int = 12):
        # Password hashing context using bcrypt
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, secret: str) -> str:
        """
        Hash a secret with a fresh random salt.

        Args:
            secret: The plain text secret to hash

        Returns:
            The hashed secret string
        """
        if not secret:
            raise ValueError("Cannot hash an empty secret")
        return self._context.hash(secret)

    def verify(self, secret: str, hashed: Optional[str]) -> bool:
        """
        Verify a plain secret against a stored hash.

        Malformed or missing hashes never raise, they simply do not match.
        """
        if not secret or not hashed:
            return False
        try:
            return self._context.verify(secret, hashed)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be identified")
            return False


class TokenIssuer:
    """Mints and verifies signed session tokens for both principal kinds."""

    def __init__(self, settings: Settings):
        if not settings.SECRET_KEY.strip():
            raise ConfigurationError("SECRET_KEY must be set before tokens can be issued")

        self._secret = settings.SECRET_KEY
        self._algorithm = settings.ALGORITHM
        self._lifetimes = {
            PrincipalKind.CANDIDATE: timedelta(minutes=settings.CANDIDATE_TOKEN_EXPIRE_MINUTES),
            PrincipalKind.EMPLOYER: timedelta(minutes=settings.EMPLOYER_TOKEN_EXPIRE_MINUTES),
        }

    def lifetime(self, kind: PrincipalKind) -> timedelta:
        return self._lifetimes[kind]

    def issue(self, principal: TokenSubject, now: Optional[datetime] = None) -> str:
        """
        Create a signed session token for an authenticated principal.

        The claim shape is the same for both kinds; ``kind`` is the
        discriminant every guard checks.
        """
        issued_at = now or datetime.now(timezone.utc)
        kind = PrincipalKind(principal.kind)
        payload = {
            "sub": str(principal.id),
            "email": principal.email,
            "kind": kind.value,
            "name": principal.display_name,
            "iat": issued_at,
            "exp": issued_at + self._lifetimes[kind],
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> SessionClaims:
        """
        Verify signature and expiry, then return the token claims.

        Raises:
            AuthenticationError: the token is expired, forged or malformed
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "kind", "iat", "exp"]},
            )
        except ExpiredSignatureError:
            raise AuthenticationError("Not authorized, token expired.")
        except InvalidTokenError:
            raise AuthenticationError("Not authorized, token failed.")

        try:
            kind = PrincipalKind(payload["kind"])
        except ValueError:
            raise AuthenticationError("Not authorized, token failed.")

        return SessionClaims(
            subject_id=payload["sub"],
            email=payload.get("email") or "",
            kind=kind,
            name=payload.get("name"),
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
