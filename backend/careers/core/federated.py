"""
Verification of third-party (Google) identity assertions.

The assertion is an RS256 ID token. Its signature is checked against the
provider's published keys, and its audience must be one of the configured
client ids, so web and mobile clients can sign in side by side.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

import jwt
from jwt import PyJWKClient
from jwt.exceptions import PyJWTError

from careers.core.config import Settings

logger = logging.getLogger("careers.federated")

KeyResolver = Callable[[str], Any]


@dataclass(frozen=True)
class VerifiedClaims:
    """Identity facts the provider vouches for."""

    subject_id: str
    email: str
    display_name: str
    avatar_url: Optional[str] = None


class FederatedIdentityVerifier:
    def __init__(
        self,
        audiences: Iterable[str],
        issuers: Iterable[str],
        key_resolver: KeyResolver,
        leeway_seconds: int = 0,
    ):
        self.audiences = [audience for audience in audiences if audience]
        self.issuers = set(issuers)
        self._key_resolver = key_resolver
        self._leeway = leeway_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "FederatedIdentityVerifier":
        jwks_client = PyJWKClient(settings.GOOGLE_CERTS_URL, cache_keys=True)

        def resolve(assertion: str) -> Any:
            return jwks_client.get_signing_key_from_jwt(assertion).key

        if not settings.google_audiences:
            logger.warning("GOOGLE_CLIENT_IDS is empty - federated sign-in will reject everything")

        return cls(
            audiences=settings.google_audiences,
            issuers=settings.google_issuers,
            key_resolver=resolve,
            leeway_seconds=settings.FEDERATED_CLOCK_SKEW_SECONDS,
        )

    def verify(self, assertion: str) -> Optional[VerifiedClaims]:
        """
        Validate an identity assertion.

        Returns:
            The verified claims, or None when the assertion is malformed,
            badly signed, expired, for another audience or another issuer.
        """
        if not assertion or not self.audiences:
            return None

        try:
            signing_key = self._key_resolver(assertion)
            payload = jwt.decode(
                assertion,
                signing_key,
                algorithms=["RS256"],
                audience=self.audiences,
                leeway=self._leeway,
                options={"require": ["sub", "aud", "iss", "exp"]},
            )
        except (PyJWTError, ValueError) as exc:
            # ValueError comes from key loading on garbage input
            logger.info("Rejected identity assertion: %s", exc)
            return None

        if payload.get("iss") not in self.issuers:
            logger.info("Rejected identity assertion from issuer %r", payload.get("iss"))
            return None

        email = payload.get("email")
        email = email.strip().lower() if isinstance(email, str) else ""
        if not email or payload.get("email_verified") is False:
            logger.info("Rejected identity assertion without a verified email")
            return None

        name = payload.get("name")
        picture = payload.get("picture")
        return VerifiedClaims(
            subject_id=str(payload["sub"]),
            email=email,
            display_name=name if isinstance(name, str) and name.strip() else email.split("@")[0],
            avatar_url=picture if isinstance(picture, str) else None,
        )
