from __future__ import annotations

import time
from pathlib import Path
from typing import Any

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from careers.core.config import Settings
from careers.core.federated import FederatedIdentityVerifier
from careers.db.session import Database
from careers.main import create_app

SECRET = "test-signing-secret"
WEB_CLIENT_ID = "web-client.apps.example.com"
MOBILE_CLIENT_ID = "mobile-client.apps.example.com"
GOOGLE_ISSUER = "https://accounts.google.com"


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite:///{tmp_path / 'careers.sqlite3'}",
        SECRET_KEY=SECRET,
        BCRYPT_ROUNDS=4,
        GOOGLE_CLIENT_IDS=f"{WEB_CLIENT_ID},{MOBILE_CLIENT_ID}",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def verifier(signing_key: rsa.RSAPrivateKey) -> FederatedIdentityVerifier:
    public_key = signing_key.public_key()
    return FederatedIdentityVerifier(
        audiences=[WEB_CLIENT_ID, MOBILE_CLIENT_ID],
        issuers=["accounts.google.com", GOOGLE_ISSUER],
        key_resolver=lambda assertion: public_key,
    )


@pytest.fixture
def make_assertion(signing_key: rsa.RSAPrivateKey):
    def build(**overrides: Any) -> str:
        now = int(time.time())
        claims = {
            "iss": GOOGLE_ISSUER,
            "aud": WEB_CLIENT_ID,
            "sub": "google-subject-1",
            "email": "gina@example.com",
            "email_verified": True,
            "name": "Gina Google",
            "picture": "https://example.com/gina.png",
            "iat": now,
            "exp": now + 3600,
        }
        key = overrides.pop("key", signing_key)
        claims.update(overrides)
        return jwt.encode({k: v for k, v in claims.items() if v is not None}, key, algorithm="RS256")

    return build


@pytest.fixture
def database(settings: Settings):
    db = Database(settings.DATABASE_URL)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def app(settings: Settings, database: Database, verifier: FederatedIdentityVerifier):
    return create_app(settings, database=database, federated_verifier=verifier)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def register_candidate(
    client: TestClient,
    email: str = "alice@example.com",
    password: str = "Secret123!",
    full_name: str = "Alice Applicant",
) -> dict[str, Any]:
    response = client.post(
        "/api/v1/auth/register",
        json={"full_name": full_name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def register_employer(
    client: TestClient,
    email: str = "hr@acme.example.com",
    company_name: str = "Acme Corp",
    password: str = "Employer123!",
) -> dict[str, Any]:
    response = client.post(
        "/api/v1/employers/register",
        json={"company_name": company_name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def post_job(client: TestClient, employer_token: str, title: str = "Backend Engineer") -> dict[str, Any]:
    response = client.post(
        "/api/v1/jobs",
        headers=bearer(employer_token),
        json={
            "title": title,
            "description": "Build Python APIs",
            "skills": ["Python", "SQL"],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()
