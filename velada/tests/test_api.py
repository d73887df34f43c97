"""
HTTP surface: envelopes, status codes, auth and admin gates
"""
from datetime import timedelta

import pytest

from velada.config import settings
from velada.errors import ErrorCode
from velada.security.rbac import create_access_token


def assert_error(response, status_code, code):
    assert response.status_code == status_code, response.text
    body = response.json()
    assert body["success"] is False
    assert body["code"] == code
    assert body["message"]
    assert body["error"]


class TestAuth:

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/auth/me")
        assert_error(response, 401, ErrorCode.AUTH_REQUIRED)

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert_error(response, 401, ErrorCode.AUTH_INVALID)

    @pytest.mark.asyncio
    async def test_expired_token(self, client, user):
        token = create_access_token(user.email, expires_delta=timedelta(minutes=-5))
        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert_error(response, 401, ErrorCode.AUTH_EXPIRED)

    @pytest.mark.asyncio
    async def test_known_user(self, client, user, user_headers):
        response = await client.get("/api/auth/me", headers=user_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user.id
        assert data["is_admin"] is False

    @pytest.mark.asyncio
    async def test_first_login_creates_user(self, client, token_headers):
        response = await client.get("/api/auth/me", headers=token_headers("New.Fan@Example.com", "Nuevo Fan"))
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "new.fan@example.com"
        assert data["name"] == "Nuevo Fan"

    @pytest.mark.asyncio
    async def test_unknown_user_without_name(self, client, token_headers):
        response = await client.get("/api/auth/me", headers=token_headers("ghost@example.com"))
        assert_error(response, 401, ErrorCode.AUTH_INVALID)

    @pytest.mark.asyncio
    async def test_cookie_auth(self, client, user):
        client.cookies.set(settings.auth_cookie_name, create_access_token(user.email))
        response = await client.get("/api/auth/me")
        assert response.status_code == 200
        assert response.json()["data"]["email"] == user.email


class TestVoteEndpoints:

    @pytest.mark.asyncio
    async def test_cast_vote(self, client, user, user_headers):
        response = await client.post(
            "/api/votes", json={"participant_id": "peereira", "combat_id": 1}, headers=user_headers
        )
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["participant_id"] == "peereira"
        assert body["data"]["user_id"] == user.id

        state = await client.get("/api/votes/1/me", headers=user_headers)
        assert state.json()["data"] == {"combat_id": 1, "has_voted": True, "participant_id": "peereira"}

    @pytest.mark.asyncio
    async def test_my_votes(self, client, user_headers):
        for combat_id, fighter in ((7, "grefg"), (2, "gaspi")):
            await client.post("/api/votes", json={"participant_id": fighter, "combat_id": combat_id}, headers=user_headers)

        response = await client.get("/api/votes/me", headers=user_headers)
        assert [(v["combat_id"], v["participant_id"]) for v in response.json()["data"]] == [(2, "gaspi"), (7, "grefg")]

    @pytest.mark.asyncio
    async def test_vote_state_before_voting(self, client, user_headers):
        response = await client.get("/api/votes/3/me", headers=user_headers)
        assert response.json()["data"] == {"combat_id": 3, "has_voted": False, "participant_id": None}

    @pytest.mark.asyncio
    async def test_cast_requires_auth(self, client):
        response = await client.post("/api/votes", json={"participant_id": "peereira", "combat_id": 1})
        assert_error(response, 401, ErrorCode.AUTH_REQUIRED)

    @pytest.mark.asyncio
    async def test_duplicate_vote_is_conflict(self, client, user_headers):
        payload = {"participant_id": "peereira", "combat_id": 1}
        await client.post("/api/votes", json=payload, headers=user_headers)

        response = await client.post(
            "/api/votes", json={"participant_id": "rivaldios", "combat_id": 1}, headers=user_headers
        )
        assert_error(response, 409, ErrorCode.ALREADY_VOTED)

    @pytest.mark.asyncio
    async def test_wrong_combat_is_bad_request(self, client, user_headers):
        response = await client.post(
            "/api/votes", json={"participant_id": "grefg", "combat_id": 1}, headers=user_headers
        )
        assert_error(response, 400, ErrorCode.PARTICIPANT_NOT_IN_COMBAT)

    @pytest.mark.asyncio
    async def test_unknown_participant_and_combat(self, client, user_headers):
        response = await client.post(
            "/api/votes", json={"participant_id": "ibai", "combat_id": 1}, headers=user_headers
        )
        assert_error(response, 400, ErrorCode.INVALID_PARTICIPANT)

        response = await client.post(
            "/api/votes", json={"participant_id": "peereira", "combat_id": 9}, headers=user_headers
        )
        assert_error(response, 400, ErrorCode.INVALID_COMBAT)

    @pytest.mark.asyncio
    async def test_malformed_body(self, client, user_headers):
        response = await client.post("/api/votes", json={"participant_id": "peereira"}, headers=user_headers)
        assert_error(response, 422, ErrorCode.VALIDATION_ERROR)
        assert response.json()["details"]["errors"][0]["loc"] == ["body", "combat_id"]

    @pytest.mark.asyncio
    async def test_closed_combat_is_conflict(self, client, user_headers, admin_headers):
        await client.post("/api/winners", json={"combat_id": 2, "participant_id": "gaspi"}, headers=admin_headers)

        response = await client.post(
            "/api/votes", json={"participant_id": "perxitaa", "combat_id": 2}, headers=user_headers
        )
        assert_error(response, 409, ErrorCode.VOTING_CLOSED)

    @pytest.mark.asyncio
    async def test_clear_votes_admin_only(self, client, user_headers, admin_headers):
        await client.post("/api/votes", json={"participant_id": "abby", "combat_id": 3}, headers=user_headers)

        response = await client.post("/api/votes/clear", json={"confirm": True}, headers=user_headers)
        assert_error(response, 403, ErrorCode.FORBIDDEN)

        response = await client.post("/api/votes/clear", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"] is True

        results = await client.get("/api/combats/3/results")
        assert results.json()["data"]["total_votes"] == 0


class TestWinnerEndpoints:

    @pytest.mark.asyncio
    async def test_set_and_get_winner(self, client, admin_headers, user_headers):
        response = await client.post(
            "/api/winners", json={"combat_id": 7, "participant_id": "westcol"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["participant_id"] == "westcol"

        response = await client.get("/api/winners/7", headers=user_headers)
        assert response.json()["data"]["participant_id"] == "westcol"

        response = await client.get("/api/winners/6", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    async def test_set_winner_requires_admin(self, client, user_headers):
        response = await client.post(
            "/api/winners", json={"combat_id": 7, "participant_id": "westcol"}, headers=user_headers
        )
        assert_error(response, 403, ErrorCode.FORBIDDEN)

    @pytest.mark.asyncio
    async def test_read_winner_requires_auth(self, client):
        response = await client.get("/api/winners/7")
        assert_error(response, 401, ErrorCode.AUTH_REQUIRED)

    @pytest.mark.asyncio
    async def test_winner_must_fight_in_combat(self, client, admin_headers):
        response = await client.post(
            "/api/winners", json={"combat_id": 7, "participant_id": "roro"}, headers=admin_headers
        )
        assert_error(response, 400, ErrorCode.PARTICIPANT_NOT_IN_COMBAT)

    @pytest.mark.asyncio
    async def test_upsert_keeps_one_row(self, client, admin_headers, user_headers):
        for fighter in ("grefg", "westcol"):
            await client.post("/api/winners", json={"combat_id": 7, "participant_id": fighter}, headers=admin_headers)

        response = await client.get("/api/winners", headers=user_headers)
        data = response.json()["data"]
        assert len(data) == 1
        assert data[0]["participant_id"] == "westcol"

    @pytest.mark.asyncio
    async def test_clear_requires_confirmation(self, client, admin_headers, user_headers):
        await client.post("/api/winners", json={"combat_id": 1, "participant_id": "peereira"}, headers=admin_headers)

        response = await client.post("/api/winners/clear", json={}, headers=admin_headers)
        assert_error(response, 400, ErrorCode.NOT_CONFIRMED)

        response = await client.post("/api/winners/clear", json={"confirm": True}, headers=admin_headers)
        assert response.status_code == 200

        response = await client.get("/api/winners", headers=user_headers)
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_delete_reopens_combat(self, client, admin_headers):
        await client.post("/api/winners", json={"combat_id": 4, "participant_id": "carlos"}, headers=admin_headers)

        response = await client.delete("/api/winners/4", headers=admin_headers)
        assert response.status_code == 200

        combat = await client.get("/api/combats/4")
        assert combat.json()["data"]["status"] == "open"
        assert combat.json()["data"]["winner"] is None


class TestPublicReads:

    @pytest.mark.asyncio
    async def test_list_combats(self, client, admin_headers):
        await client.post("/api/winners", json={"combat_id": 5, "participant_id": "alana"}, headers=admin_headers)

        response = await client.get("/api/combats")
        data = response.json()["data"]
        assert data["total"] == 7
        closed = [combat for combat in data["combats"] if combat["status"] == "closed"]
        assert [(c["id"], c["winner"]) for c in closed] == [(5, "alana")]
        assert data["combats"][0]["fighter1_avatar"].endswith("/cards/peereira.webp")

    @pytest.mark.asyncio
    async def test_unknown_combat(self, client):
        response = await client.get("/api/combats/99")
        assert_error(response, 404, ErrorCode.COMBAT_NOT_FOUND)

        response = await client.get("/api/combats/99/results")
        assert_error(response, 404, ErrorCode.COMBAT_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_results_cover_every_participant(self, client, user_headers):
        await client.post("/api/votes", json={"participant_id": "viruzz", "combat_id": 6}, headers=user_headers)

        response = await client.get("/api/results")
        data = response.json()["data"]
        assert len(data) == 14
        assert data[0] == {"participant_id": "viruzz", "vote_count": 1}

        response = await client.get("/api/results/combats")
        assert len(response.json()["data"]) == 7

    @pytest.mark.asyncio
    async def test_api_index_and_health(self, client):
        response = await client.get("/api")
        assert "votes" in response.json()["data"]["endpoints"]

        response = await client.get("/health")
        assert response.json()["status"] == "healthy"


class TestUserEndpoints:

    @pytest.mark.asyncio
    async def test_list_users_paginated(self, client, user, admin):
        response = await client.get("/api/users", params={"limit": "1", "offset": "1"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["items"]) == 1
        assert data["pagination"] == {"total": 2, "limit": 1, "offset": 1, "page": 2, "total_pages": 2}

    @pytest.mark.asyncio
    async def test_bad_pagination_falls_back(self, client, user):
        response = await client.get("/api/users", params={"limit": "abc", "offset": "-5"})
        assert response.status_code == 200
        pagination = response.json()["data"]["pagination"]
        assert (pagination["limit"], pagination["offset"]) == (10, 0)

        response = await client.get("/api/users", params={"limit": "500"})
        assert response.json()["data"]["pagination"]["limit"] == 100

    @pytest.mark.asyncio
    async def test_get_user(self, client, user):
        response = await client.get(f"/api/users/{user.id}")
        assert response.json()["data"]["email"] == user.email

        response = await client.get("/api/users/does-not-exist")
        assert_error(response, 404, ErrorCode.USER_NOT_FOUND)

    @pytest.mark.asyncio
    async def test_search_users(self, client, user, admin):
        response = await client.get("/api/users/search", params={"q": "garc"})
        assert [item["id"] for item in response.json()["data"]] == [user.id]

        response = await client.get("/api/users/search", params={"q": "a"})
        assert_error(response, 400, ErrorCode.INVALID_INPUT)
