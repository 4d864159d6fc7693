"""
Tests for the HTTP API.

Tests:
- Health and readiness probes
- Anonymous and invalid-token requests
- Talent profile endpoints
- Full hiring flow: profile, team, posting, application, match
- Error envelopes for conflicts, permissions and validation
- Search and option endpoints
"""

import pytest

from tests.factories import (
    auth_headers,
    make_token,
    posting_payload,
    profile_payload,
    team_payload,
)

API = "/api/v1"


async def create_profile(client, subject, **overrides):
    response = await client.put(
        f"{API}/talent/profile",
        json=profile_payload(**overrides),
        headers=auth_headers(subject),
    )
    assert response.status_code == 200, response.text
    return response.json()["talent_id"]


async def create_team(client, subject, **overrides):
    response = await client.post(
        f"{API}/teams", json=team_payload(**overrides), headers=auth_headers(subject)
    )
    assert response.status_code == 201, response.text
    return response.json()["team_id"]


async def create_posting(client, subject, team_id, **overrides):
    response = await client.post(
        f"{API}/teams/{team_id}/postings",
        json=posting_payload(**overrides),
        headers=auth_headers(subject),
    )
    assert response.status_code == 201, response.text
    return response.json()["job_posting_id"]


@pytest.fixture
async def hiring(client):
    """Owner with a team and an open posting, and a worker with a profile."""
    await create_profile(client, "owner", first_name="Olivia")
    await create_profile(client, "worker", first_name="Wes", email="wes@example.com")
    team_id = await create_team(client, "owner")
    posting_id = await create_posting(client, "owner", team_id)
    return {"team_id": team_id, "posting_id": posting_id}


# ==================== Probes and authentication ==================== #

class TestProbes:
    """Test health and readiness endpoints."""

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_ready(self, client):
        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready", "database": "ok"}


class TestAuthentication:
    """Test anonymous and token-bearing requests."""

    async def test_anonymous_profile_is_null(self, client):
        response = await client.get(f"{API}/talent/profile")

        assert response.status_code == 200
        assert response.json() is None

    async def test_anonymous_lists_are_empty(self, client):
        for path in ("/applications/mine", "/matches/mine", "/teams/mine"):
            response = await client.get(f"{API}{path}")
            assert response.status_code == 200
            assert response.json() == []

    async def test_anonymous_mutation_is_401(self, client):
        response = await client.post(f"{API}/teams", json=team_payload())

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    async def test_invalid_token_is_401(self, client):
        response = await client.get(
            f"{API}/talent/profile", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"

    async def test_expired_token_is_401(self, client):
        token = make_token("maria", expires_in=-60)

        response = await client.get(
            f"{API}/talent/me", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    async def test_me(self, client):
        response = await client.get(f"{API}/talent/me", headers=auth_headers("maria"))

        assert response.json() == {
            "id": "maria",
            "name": "Maria",
            "email": "maria@example.com",
            "token_identifier": "https://auth.test.local|maria",
        }


# ==================== Talent profiles ==================== #

class TestTalentProfileEndpoints:
    """Test profile endpoints."""

    async def test_save_and_get(self, client):
        talent_id = await create_profile(client, "maria")

        response = await client.get(f"{API}/talent/profile", headers=auth_headers("maria"))

        profile = response.json()
        assert profile["id"] == talent_id
        assert profile["availability"]["friday"] == ["Nights"]
        assert profile["languages"] == ["English", "Spanish"]

    async def test_invalid_profile_is_422(self, client):
        response = await client.put(
            f"{API}/talent/profile",
            json=profile_payload(last_four_ssn="12", availability={"someday": ["Nights"]}),
            headers=auth_headers("maria"),
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        fields = {detail["field"] for detail in error["details"]}
        assert "body.last_four_ssn" in fields
        assert "body.availability" in fields

    async def test_delete(self, client):
        await create_profile(client, "maria")

        response = await client.delete(f"{API}/talent/profile", headers=auth_headers("maria"))
        assert response.json() == {"success": True}

        response = await client.get(f"{API}/talent/profile", headers=auth_headers("maria"))
        assert response.json() is None

    async def test_delete_without_profile_is_404(self, client):
        response = await client.delete(f"{API}/talent/profile", headers=auth_headers("maria"))

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Talent profile not found"


# ==================== Hiring flow ==================== #

class TestHiringFlow:
    """Test the application and match lifecycle over HTTP."""

    async def test_apply_match_and_complete(self, client, hiring):
        worker = auth_headers("worker")
        owner = auth_headers("owner")

        applied = await client.post(
            f"{API}/applications",
            json={"job_posting_id": hiring["posting_id"], "notes": "Weekends work"},
            headers=worker,
        )
        assert applied.status_code == 201
        assert applied.json()["job_title"] == "Line Cook"
        assert applied.json()["team_name"] == "Harbor Kitchen"
        application_id = applied.json()["application_id"]

        team_apps = await client.get(
            f"{API}/teams/{hiring['team_id']}/applications",
            params={"status": "pending"},
            headers=owner,
        )
        assert [a["id"] for a in team_apps.json()] == [application_id]

        decided = await client.patch(
            f"{API}/applications/{application_id}/status",
            json={"status": "matched"},
            headers=owner,
        )
        assert decided.status_code == 200

        matches = (await client.get(f"{API}/matches/mine", headers=worker)).json()
        assert len(matches) == 1
        assert matches[0]["status"] == "active"
        assert matches[0]["compensation_amount"] == 24
        assert matches[0]["team"]["contact_email"] == "jobs@harborkitchen.com"

        teams = (await client.get(f"{API}/teams/mine", headers=worker)).json()
        assert [t["membership"]["role"] for t in teams] == ["member"]

        completed = await client.patch(
            f"{API}/matches/{matches[0]['id']}/status",
            json={"status": "completed"},
            headers=owner,
        )
        assert completed.status_code == 200

        team_matches = await client.get(
            f"{API}/teams/{hiring['team_id']}/matches", headers=owner
        )
        assert [m["status"] for m in team_matches.json()] == ["completed"]

    async def test_duplicate_application_is_409(self, client, hiring):
        body = {"job_posting_id": hiring["posting_id"]}
        await client.post(f"{API}/applications", json=body, headers=auth_headers("worker"))

        response = await client.post(
            f"{API}/applications", json=body, headers=auth_headers("worker")
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    async def test_withdraw_then_decide_is_409(self, client, hiring):
        applied = await client.post(
            f"{API}/applications",
            json={"job_posting_id": hiring["posting_id"]},
            headers=auth_headers("worker"),
        )
        application_id = applied.json()["application_id"]

        withdrawn = await client.post(
            f"{API}/applications/{application_id}/withdraw", headers=auth_headers("worker")
        )
        assert withdrawn.status_code == 200

        response = await client.patch(
            f"{API}/applications/{application_id}/status",
            json={"status": "matched"},
            headers=auth_headers("owner"),
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    async def test_worker_cannot_decide(self, client, hiring):
        applied = await client.post(
            f"{API}/applications",
            json={"job_posting_id": hiring["posting_id"]},
            headers=auth_headers("worker"),
        )

        response = await client.patch(
            f"{API}/applications/{applied.json()['application_id']}/status",
            json={"status": "matched"},
            headers=auth_headers("worker"),
        )

        assert response.status_code == 403

    async def test_unknown_status_is_422(self, client, hiring):
        response = await client.patch(
            f"{API}/applications/1/status",
            json={"status": "hired"},
            headers=auth_headers("owner"),
        )
        assert response.status_code == 422

    async def test_deactivated_posting_rejects_applications(self, client, hiring):
        closed = await client.delete(
            f"{API}/postings/{hiring['posting_id']}", headers=auth_headers("owner")
        )
        assert closed.status_code == 200

        response = await client.post(
            f"{API}/applications",
            json={"job_posting_id": hiring["posting_id"]},
            headers=auth_headers("worker"),
        )
        assert response.status_code == 404


# ==================== Teams ==================== #

class TestTeamEndpoints:
    """Test team management over HTTP."""

    async def test_update_and_delete(self, client, hiring):
        owner = auth_headers("owner")

        updated = await client.patch(
            f"{API}/teams/{hiring['team_id']}", json={"name": "Harbor Bistro"}, headers=owner
        )
        assert updated.status_code == 200

        teams = (await client.get(f"{API}/teams/mine", headers=owner)).json()
        assert teams[0]["name"] == "Harbor Bistro"

        deleted = await client.delete(f"{API}/teams/{hiring['team_id']}", headers=owner)
        assert deleted.json() == {"success": True}
        assert (await client.get(f"{API}/teams/mine", headers=owner)).json() == []

    async def test_outsider_is_403(self, client, hiring):
        response = await client.get(
            f"{API}/teams/{hiring['team_id']}/applications", headers=auth_headers("worker")
        )

        assert response.status_code == 403

    async def test_inverted_compensation_is_422(self, client, hiring):
        response = await client.post(
            f"{API}/teams/{hiring['team_id']}/postings",
            json=posting_payload(compensation_range={"min": 30, "max": 20}),
            headers=auth_headers("owner"),
        )
        assert response.status_code == 422


# ==================== Search and options ==================== #

class TestSearchEndpoints:
    """Test search endpoints."""

    async def test_ranked_job_search(self, client, hiring):
        response = await client.get(
            f"{API}/talent/job-search", headers=auth_headers("worker")
        )

        results = response.json()
        assert [r["id"] for r in results] == [hiring["posting_id"]]
        assert results[0]["match_score"] == 100

    async def test_advanced_job_search(self, client, hiring):
        response = await client.post(
            f"{API}/search/jobs",
            json={"position_type": "FOH"},
            headers=auth_headers("worker"),
        )
        assert response.json() == []

    async def test_talent_search_requires_manager(self, client, hiring):
        allowed = await client.post(
            f"{API}/search/talent",
            json={"skill_names": ["Grill"]},
            headers=auth_headers("owner"),
        )
        denied = await client.post(
            f"{API}/search/talent", json={}, headers=auth_headers("worker")
        )

        assert allowed.status_code == 200
        assert {p["first_name"] for p in allowed.json()} == {"Olivia", "Wes"}
        assert all("email" not in p for p in allowed.json())
        assert denied.status_code == 403


class TestOptionEndpoints:
    """Test predefined option endpoints."""

    async def test_add_list_search(self, client):
        headers = auth_headers("admin")
        for value in ("Fine dining", "Fast casual"):
            created = await client.post(
                f"{API}/options",
                json={"category": "service_style", "value": value, "display_name": value},
                headers=headers,
            )
            assert created.status_code == 201

        listed = await client.get(f"{API}/options", params={"category": "service_style"})
        found = await client.get(
            f"{API}/options/search", params={"category": "service_style", "q": "CASUAL"}
        )
        categories = await client.get(f"{API}/options/categories")

        assert [o["value"] for o in listed.json()] == ["Fine dining", "Fast casual"]
        assert [o["value"] for o in found.json()] == ["Fast casual"]
        assert categories.json() == ["service_style"]

    async def test_search_finds_inactive_unless_active_only(self, client):
        await client.post(
            f"{API}/options",
            json={
                "category": "service_style",
                "value": "Food truck",
                "display_name": "Food truck",
                "is_active": False,
            },
            headers=auth_headers("admin"),
        )

        found = await client.get(
            f"{API}/options/search", params={"category": "service_style", "q": "truck"}
        )
        active = await client.get(
            f"{API}/options/search",
            params={"category": "service_style", "q": "truck", "active_only": "true"},
        )

        assert [o["value"] for o in found.json()] == ["Food truck"]
        assert active.json() == []

    async def test_duplicate_is_409(self, client):
        body = {"category": "shift", "value": "Nights", "display_name": "Nights"}
        await client.post(f"{API}/options", json=body, headers=auth_headers("admin"))

        response = await client.post(f"{API}/options", json=body, headers=auth_headers("admin"))

        assert response.status_code == 409

    async def test_anonymous_add_is_401(self, client):
        response = await client.post(
            f"{API}/options",
            json={"category": "shift", "value": "Nights", "display_name": "Nights"},
        )
        assert response.status_code == 401
