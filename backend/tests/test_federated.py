from __future__ import annotations

import time

from cryptography.hazmat.primitives.asymmetric import rsa

from careers.core.federated import FederatedIdentityVerifier
from conftest import MOBILE_CLIENT_ID, WEB_CLIENT_ID


def test_valid_assertion_yields_claims(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    claims = verifier.verify(make_assertion())
    assert claims is not None
    assert claims.subject_id == "google-subject-1"
    assert claims.email == "gina@example.com"
    assert claims.display_name == "Gina Google"
    assert claims.avatar_url == "https://example.com/gina.png"


def test_every_configured_audience_is_accepted(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    assert verifier.verify(make_assertion(aud=WEB_CLIENT_ID)) is not None
    assert verifier.verify(make_assertion(aud=MOBILE_CLIENT_ID)) is not None


def test_foreign_audience_is_rejected_despite_valid_signature(
    verifier: FederatedIdentityVerifier, make_assertion
) -> None:
    assert verifier.verify(make_assertion(aud="someone-elses-app.apps.example.com")) is None


def test_expired_assertion_is_rejected(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    now = int(time.time())
    assert verifier.verify(make_assertion(iat=now - 7200, exp=now - 3600)) is None


def test_assertion_signed_by_unknown_key_is_rejected(
    verifier: FederatedIdentityVerifier, make_assertion
) -> None:
    stranger = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    assert verifier.verify(make_assertion(key=stranger)) is None


def test_wrong_issuer_is_rejected(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    assert verifier.verify(make_assertion(iss="https://evil.example.com")) is None


def test_unverified_email_is_rejected(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    assert verifier.verify(make_assertion(email_verified=False)) is None


def test_malformed_assertions_are_rejected(verifier: FederatedIdentityVerifier) -> None:
    assert verifier.verify("") is None
    assert verifier.verify("not-a-jwt") is None
    assert verifier.verify("a.b.c") is None


def test_resolver_failure_is_a_rejection(make_assertion) -> None:
    def broken_resolver(assertion: str):
        raise ValueError("no key for this kid")

    verifier = FederatedIdentityVerifier(
        audiences=[WEB_CLIENT_ID],
        issuers=["https://accounts.google.com"],
        key_resolver=broken_resolver,
    )
    assert verifier.verify(make_assertion()) is None


def test_no_configured_audience_rejects_everything(make_assertion, signing_key) -> None:
    verifier = FederatedIdentityVerifier(
        audiences=[],
        issuers=["https://accounts.google.com"],
        key_resolver=lambda assertion: signing_key.public_key(),
    )
    assert verifier.verify(make_assertion()) is None


def test_non_string_email_claim_is_a_rejection(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    assert verifier.verify(make_assertion(email=12345)) is None
    assert verifier.verify(make_assertion(email=["gina@example.com"])) is None


def test_odd_profile_claims_fall_back(verifier: FederatedIdentityVerifier, make_assertion) -> None:
    claims = verifier.verify(make_assertion(name={"given": "Gina"}, picture=42))
    assert claims is not None
    assert claims.display_name == "gina"
    assert claims.avatar_url is None
