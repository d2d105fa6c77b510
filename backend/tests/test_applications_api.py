from __future__ import annotations

import jwt
import pytest
from fastapi.testclient import TestClient

from careers.core.errors import InternalError
from careers.services import ApplicationSubmissionService
from conftest import SECRET, bearer, post_job, register_candidate, register_employer

pytestmark = pytest.mark.integration


def login_candidate(client: TestClient, email: str, password: str) -> str:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["token"]


def test_end_to_end_apply_and_review(client: TestClient) -> None:
    registered = client.post(
        "/api/v1/auth/register",
        json={"full_name": "Alice Applicant", "email": "alice@example.com", "password": "Secret123!"},
    )
    assert registered.status_code == 201
    first_token = registered.json()["token"]

    alice_token = login_candidate(client, "alice@example.com", "Secret123!")
    assert alice_token != first_token
    first_claims = jwt.decode(first_token, SECRET, algorithms=["HS256"])
    login_claims = jwt.decode(alice_token, SECRET, algorithms=["HS256"])
    assert (first_claims["sub"], first_claims["email"]) == (login_claims["sub"], login_claims["email"])

    e1 = register_employer(client, email="hr@e1.example.com", company_name="E1")
    e2 = register_employer(client, email="hr@e2.example.com", company_name="E2")
    j1 = post_job(client, e1["token"], title="J1")
    assert j1["employer_id"] == e1["principal"]["id"]

    applied = client.post(f"/api/v1/jobs/{j1['id']}/apply", headers=bearer(alice_token))
    assert applied.status_code == 201
    application_id = applied.json()["application_id"]

    repeat = client.post(f"/api/v1/jobs/{j1['id']}/apply", headers=bearer(alice_token))
    assert repeat.status_code == 409
    assert repeat.json() == {"error": "You have already applied to this job."}

    listing = client.get("/api/v1/applications", params={"jobId": j1["id"]}, headers=bearer(e1["token"]))
    assert listing.status_code == 200
    body = listing.json()
    assert body["total"] == 1
    entry = body["applications"][0]
    assert entry["id"] == application_id
    assert entry["status"] == "applied"
    assert entry["employer_id"] == e1["principal"]["id"]
    assert entry["profile_snapshot"]["personal"]["email"] == "alice@example.com"

    not_owner = client.get("/api/v1/applications", params={"jobId": j1["id"]}, headers=bearer(e2["token"]))
    assert not_owner.status_code == 403


def test_apply_requires_candidate_token(client: TestClient) -> None:
    employer = register_employer(client)
    job = post_job(client, employer["token"])
    client.cookies.clear()

    no_token = client.post(f"/api/v1/jobs/{job['id']}/apply")
    assert no_token.status_code == 401

    employer_token = client.post(f"/api/v1/jobs/{job['id']}/apply", headers=bearer(employer["token"]))
    assert employer_token.status_code == 403


def test_apply_to_unknown_or_closed_job_is_404(client: TestClient) -> None:
    employer = register_employer(client)
    job = post_job(client, employer["token"])
    candidate = register_candidate(client)

    unknown = client.post("/api/v1/jobs/no-such-job/apply", headers=bearer(candidate["token"]))
    assert unknown.status_code == 404

    closed = client.patch(
        f"/api/v1/jobs/{job['id']}/status",
        headers=bearer(employer["token"]),
        json={"status": "inactive"},
    )
    assert closed.status_code == 200
    response = client.post(f"/api/v1/jobs/{job['id']}/apply", headers=bearer(candidate["token"]))
    assert response.status_code == 404


def test_blank_job_id_is_400(client: TestClient) -> None:
    candidate = register_candidate(client)
    response = client.post("/api/v1/jobs/%20/apply", headers=bearer(candidate["token"]))
    assert response.status_code == 400


def test_listing_without_job_id_is_400(client: TestClient) -> None:
    employer = register_employer(client)
    response = client.get("/api/v1/applications", headers=bearer(employer["token"]))
    assert response.status_code == 400


def test_snapshot_survives_profile_edits(client: TestClient) -> None:
    employer = register_employer(client)
    job = post_job(client, employer["token"])
    candidate = register_candidate(client)
    headers = bearer(candidate["token"])

    updated = client.patch(
        "/api/v1/profile",
        headers=headers,
        json={"experience_level": "senior", "skills": ["Python", "FastAPI"], "ctc_expected": 1500000},
    )
    assert updated.status_code == 200
    assert updated.json()["skills"] == ["Python", "FastAPI"]

    client.post(
        f"/api/v1/jobs/{job['id']}/apply",
        headers=headers,
        json={"cover_letter": "I would love to build your APIs."},
    )

    client.patch("/api/v1/profile", headers=headers, json={"experience_level": "principal", "skills": ["Go"]})
    assert client.get("/api/v1/profile", headers=headers).json()["experience_level"] == "principal"

    listing = client.get("/api/v1/applications", params={"jobId": job["id"]}, headers=bearer(employer["token"]))
    entry = listing.json()["applications"][0]
    assert entry["cover_letter"] == "I would love to build your APIs."
    assert entry["profile_snapshot"]["experience_level"] == "senior"
    assert entry["profile_snapshot"]["skills"] == ["Python", "FastAPI"]
    assert entry["profile_snapshot"]["ctc_expected"] == 1500000
    assert "password_hash" not in entry["profile_snapshot"]


def test_candidate_lists_own_applications(client: TestClient) -> None:
    employer = register_employer(client)
    first = post_job(client, employer["token"], title="Backend Engineer")
    second = post_job(client, employer["token"], title="Data Engineer")
    alice = register_candidate(client)
    bob = register_candidate(client, email="bob@example.com", full_name="Bob")

    client.post(f"/api/v1/jobs/{first['id']}/apply", headers=bearer(alice["token"]))
    client.post(f"/api/v1/jobs/{second['id']}/apply", headers=bearer(alice["token"]))
    client.post(f"/api/v1/jobs/{first['id']}/apply", headers=bearer(bob["token"]))

    mine = client.get("/api/v1/applications/mine", headers=bearer(alice["token"]))
    assert mine.status_code == 200
    assert mine.json()["total"] == 2
    assert {entry["job_id"] for entry in mine.json()["applications"]} == {first["id"], second["id"]}


def test_employer_moves_application_through_review(client: TestClient) -> None:
    owner = register_employer(client)
    stranger = register_employer(client, email="hr@globex.example.com", company_name="Globex")
    job = post_job(client, owner["token"])
    candidate = register_candidate(client)
    application_id = client.post(
        f"/api/v1/jobs/{job['id']}/apply", headers=bearer(candidate["token"])
    ).json()["application_id"]

    url = f"/api/v1/applications/{application_id}/status"
    shortlisted = client.patch(url, headers=bearer(owner["token"]), json={"status": "shortlisted"})
    assert shortlisted.status_code == 200
    assert shortlisted.json()["status"] == "shortlisted"

    assert client.patch(url, headers=bearer(stranger["token"]), json={"status": "hired"}).status_code == 403
    assert client.patch(url, headers=bearer(owner["token"]), json={"status": "ghosted"}).status_code == 400
    assert client.patch(url, headers=bearer(candidate["token"]), json={"status": "hired"}).status_code == 403


def test_job_board_lists_active_jobs(client: TestClient) -> None:
    employer = register_employer(client)
    python_job = post_job(client, employer["token"], title="Backend Engineer")
    closed = post_job(client, employer["token"], title="Old Role")
    client.patch(
        f"/api/v1/jobs/{closed['id']}/status",
        headers=bearer(employer["token"]),
        json={"status": "inactive"},
    )

    board = client.get("/api/v1/jobs")
    assert board.status_code == 200
    assert [job["id"] for job in board.json()] == [python_job["id"]]

    assert client.get("/api/v1/jobs", params={"skill": "python"}).json()[0]["id"] == python_job["id"]
    assert client.get("/api/v1/jobs", params={"skill": "cobol"}).json() == []

    mine = client.get("/api/v1/jobs/mine", headers=bearer(employer["token"]))
    assert {job["id"] for job in mine.json()} == {python_job["id"], closed["id"]}


def test_only_owner_changes_job_status(client: TestClient) -> None:
    owner = register_employer(client)
    stranger = register_employer(client, email="hr@globex.example.com", company_name="Globex")
    job = post_job(client, owner["token"])

    url = f"/api/v1/jobs/{job['id']}/status"
    assert client.patch(url, headers=bearer(stranger["token"]), json={"status": "inactive"}).status_code == 403
    assert client.patch(url, headers=bearer(owner["token"]), json={"status": "archived"}).status_code == 400


def test_unexpected_errors_are_generic_500(client: TestClient, monkeypatch) -> None:
    candidate = register_candidate(client)

    def boom(self, candidate_id):
        raise RuntimeError("database connection string with password=hunter2")

    monkeypatch.setattr(ApplicationSubmissionService, "list_for_candidate", boom)
    response = client.get("/api/v1/applications/mine", headers=bearer(candidate["token"]))
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert response.headers.get("x-request-id")


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_internal_errors_hide_their_detail(client: TestClient, monkeypatch) -> None:
    employer = register_employer(client)
    job = post_job(client, employer["token"])
    candidate = register_candidate(client)

    def failing_apply(self, candidate_id, job_id, cover_letter=None):
        raise InternalError("constraint uq_something violated on host db-01")

    monkeypatch.setattr(ApplicationSubmissionService, "apply", failing_apply)
    response = client.post(f"/api/v1/jobs/{job['id']}/apply", headers=bearer(candidate["token"]))
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_error_paths_return_connections_to_the_pool(client: TestClient, app) -> None:
    candidate = register_candidate(client)
    client.cookies.clear()
    pool = app.state.database.engine.pool

    for _ in range(40):
        assert client.post("/api/v1/jobs/no-such-job/apply", headers=bearer(candidate["token"])).status_code == 404
        assert client.get("/api/v1/auth/me", headers=bearer("not-a-token")).status_code == 401

    assert pool.checkedout() == 0


def test_profile_rejects_blank_names_and_infinite_pay(client: TestClient) -> None:
    headers = bearer(register_candidate(client)["token"])

    assert client.patch("/api/v1/profile", headers=headers, json={"full_name": "<>()"}).status_code == 400
    assert client.patch("/api/v1/profile", headers=headers, json={"full_name": None}).status_code == 400

    infinite = client.patch(
        "/api/v1/profile",
        headers={**headers, "Content-Type": "application/json"},
        content='{"ctc_expected": Infinity}',
    )
    assert infinite.status_code == 400

    profile = client.get("/api/v1/profile", headers=headers).json()
    assert profile["full_name"] == "Alice Applicant"
    assert profile["ctc_expected"] is None


def test_profile_null_clears_optional_fields(client: TestClient) -> None:
    headers = bearer(register_candidate(client)["token"])
    filled = client.patch(
        "/api/v1/profile",
        headers=headers,
        json={
            "gender": "female",
            "ctc_expected": 900000,
            "resume_url": "/uploads/resume-alice.pdf",
            "skills": ["Python"],
        },
    )
    assert filled.json()["resume_url"] == "/uploads/resume-alice.pdf"

    cleared = client.patch(
        "/api/v1/profile",
        headers=headers,
        json={"gender": None, "ctc_expected": None, "resume_url": None, "skills": None},
    )
    assert cleared.status_code == 200
    body = cleared.json()
    assert body["gender"] is None
    assert body["ctc_expected"] is None
    assert body["resume_url"] is None
    assert body["skills"] == []
    assert body["full_name"] == "Alice Applicant"

    # Omitted fields stay as they were
    untouched = client.patch("/api/v1/profile", headers=headers, json={"experience_level": "senior"}).json()
    assert untouched["full_name"] == "Alice Applicant"
    assert untouched["experience_level"] == "senior"
