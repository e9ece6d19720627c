"""HTTP-level tests: routing, status codes, error bodies and identity handling."""

from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from vibe_awards.core.rate_limit import ClientRateLimiter
from vibe_awards.main import app
from vibe_awards.models import Battle, CollaborationInterest, Like, Nomination, Submission, Vote

from conftest import auth_headers, make_battle, make_post, make_submission, make_user


@pytest_asyncio.fixture
async def seeded(session_factory):
    """Two developers, an admin, three approved apps and an active battle A vs B."""
    async with session_factory() as session:
        maker = await make_user(session, "maker")
        rival = await make_user(session, "rival")
        admin = await make_user(session, "boss", role="admin")
        app_a = await make_submission(session, maker, name="Alpha")
        app_b = await make_submission(session, rival, name="Beta")
        app_c = await make_submission(session, rival, name="Gamma")
        battle = await make_battle(session, app_a, app_b)
        await session.commit()
        return SimpleNamespace(
            maker=maker, rival=rival, admin=admin,
            app_a=app_a, app_b=app_b, app_c=app_c, battle=battle,
        )


async def count(session_factory, model, **filters) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(model.id)).filter_by(**filters))
        return result.scalar()


class TestEngagementEndpoints:

    @pytest.mark.asyncio
    async def test_like_toggle(self, client, seeded):
        url = f"/api/apps/{seeded.app_a.id}/like"

        first = await client.post(url)
        assert first.status_code == 200
        assert first.json() == {"message": "App liked", "liked": True}

        second = await client.post(url)
        assert second.json() == {"message": "Like removed", "liked": False}

    @pytest.mark.asyncio
    async def test_signed_in_like_is_separate_from_ip_like(self, client, seeded, session_factory):
        url = f"/api/apps/{seeded.app_a.uuid}/like"
        await client.post(url)
        response = await client.post(url, headers=auth_headers(seeded.rival))

        assert response.json()["liked"] is True
        assert await count(session_factory, Like, submission_id=seeded.app_a.id) == 2

    @pytest.mark.asyncio
    async def test_invalid_token_falls_back_to_ip(self, client, seeded):
        url = f"/api/apps/{seeded.app_a.id}/like"
        await client.post(url)
        response = await client.post(url, headers={"Authorization": "Bearer not-a-token"})

        assert response.json()["liked"] is False

    @pytest.mark.asyncio
    async def test_forwarded_header_ignored_by_default(self, client, seeded):
        url = f"/api/apps/{seeded.app_a.id}/like"
        await client.post(url, headers={"X-Forwarded-For": "1.1.1.1"})
        response = await client.post(url, headers={"X-Forwarded-For": "2.2.2.2"})

        assert response.json()["liked"] is False

    @pytest.mark.asyncio
    async def test_like_missing_app(self, client, seeded):
        response = await client.post("/api/apps/99999/like")
        assert response.status_code == 404
        assert response.json() == {"error": "App not found"}

    @pytest.mark.asyncio
    async def test_unusable_refs_are_not_found(self, client, seeded):
        oversized = await client.post("/api/apps/99999999999999999999999/like")
        assert oversized.status_code == 404
        assert oversized.json() == {"error": "App not found"}

        superscript = await client.get("/api/apps/%C2%B2")
        assert superscript.status_code == 404
        assert superscript.json() == {"error": "App not found"}

        my_vote = await client.get("/api/battles/99999999999999999999999/my-vote")
        assert my_vote.status_code == 404

    @pytest.mark.asyncio
    async def test_vote_with_non_ascii_digit_app_id(self, client, seeded):
        response = await client.post(
            f"/api/battles/{seeded.battle.id}/vote", json={"app_id": "\u00b2"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "app_id is not part of this battle"}

    @pytest.mark.asyncio
    async def test_nominate_twice(self, client, seeded, session_factory):
        url = f"/api/apps/{seeded.app_c.id}/nominate"

        first = await client.post(url)
        assert first.status_code == 200
        assert first.json() == {"message": "App nominated for battle"}

        second = await client.post(url)
        assert second.status_code == 400
        assert second.json() == {"error": "Already nominated this app"}
        assert await count(session_factory, Nomination, submission_id=seeded.app_c.id) == 1

    @pytest.mark.asyncio
    async def test_engagement_status(self, client, seeded):
        url = f"/api/apps/{seeded.app_a.id}"
        await client.post(f"{url}/nominate")

        response = await client.get(f"{url}/engagement")
        assert response.json() == {"liked": False, "nominated": True}

    @pytest.mark.asyncio
    async def test_vote_flow(self, client, seeded, session_factory):
        url = f"/api/battles/{seeded.battle.id}/vote"

        response = await client.post(url, json={"app_id": seeded.app_a.id})
        assert response.status_code == 200
        assert response.json() == {"message": "Vote cast successfully"}

        again = await client.post(url, json={"app_id": seeded.app_b.id})
        assert again.status_code == 400
        assert again.json() == {"error": "Already voted in this battle"}

        my_vote = await client.get(f"/api/battles/{seeded.battle.id}/my-vote")
        assert my_vote.json() == {"app_id": seeded.app_a.id}

        async with session_factory() as session:
            battle = await session.get(Battle, seeded.battle.id)
            assert (battle.votes_a, battle.votes_b, battle.total_votes) == (1, 0, 1)

    @pytest.mark.asyncio
    async def test_vote_requires_app_id(self, client, seeded):
        for body in ({}, {"app_id": None}, {"app_id": ""}):
            response = await client.post(f"/api/battles/{seeded.battle.id}/vote", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "app_id is required"}

    @pytest.mark.asyncio
    async def test_vote_for_app_outside_battle(self, client, seeded, session_factory):
        response = await client.post(
            f"/api/battles/{seeded.battle.id}/vote", json={"app_id": seeded.app_c.id}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "app_id is not part of this battle"}
        assert await count(session_factory, Vote) == 0

    @pytest.mark.asyncio
    async def test_vote_missing_battle(self, client, seeded):
        response = await client.post("/api/battles/777/vote", json={"app_id": seeded.app_a.id})
        assert response.status_code == 404
        assert response.json() == {"error": "Battle not found"}

    @pytest.mark.asyncio
    async def test_my_vote_null_before_voting(self, client, seeded):
        response = await client.get(f"/api/battles/{seeded.battle.uuid}/my-vote")
        assert response.status_code == 200
        assert response.json() is None


class TestReadEndpoints:

    @pytest.mark.asyncio
    async def test_list_apps(self, client, seeded):
        await client.post(f"/api/apps/{seeded.app_b.id}/like")

        response = await client.get("/api/apps", params={"limit": 2})
        body = response.json()

        assert response.status_code == 200
        assert body["total"] == 3
        assert len(body["apps"]) == 2
        beta = next(a for a in body["apps"] if a["id"] == seeded.app_b.id)
        assert beta["like_count"] == 1
        assert beta["developer_name"] == "rival"

    @pytest.mark.asyncio
    async def test_list_apps_bad_limit(self, client, seeded):
        response = await client.get("/api/apps", params={"limit": 0})
        assert response.status_code == 400
        assert "limit" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_app_detail(self, client, seeded):
        response = await client.get(f"/api/apps/{seeded.app_a.uuid}")
        body = response.json()

        assert response.status_code == 200
        assert body["name"] == "Alpha"
        assert body["view_count"] == 1
        assert body["developer"]["username"] == "maker"

    @pytest.mark.asyncio
    async def test_current_battle(self, client, seeded):
        response = await client.get("/api/battles/current")
        body = response.json()

        assert body["id"] == seeded.battle.id
        assert body["app_a"]["name"] == "Alpha"
        assert body["app_b"]["name"] == "Beta"
        assert body["total_votes"] == 0

    @pytest.mark.asyncio
    async def test_current_battle_null(self, client):
        response = await client.get("/api/battles/current")
        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_health_and_root(self, client):
        health = await client.get("/api/health")
        assert health.json() == {"status": "ok", "database": "ok"}

        root = await client.get("/")
        assert root.json()["health"] == "/api/health"


class TestAuthEndpoints:

    @pytest.mark.asyncio
    async def test_register_login_me(self, client):
        register = await client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "username": "newbie", "password": "secret123", "role": "voter"},
        )
        assert register.status_code == 201
        assert register.json()["message"] == "User created successfully"
        assert register.json()["user"]["role"] == "voter"

        login = await client.post(
            "/api/auth/login", json={"email": "new@example.com", "password": "secret123"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["username"] == "newbie"

    @pytest.mark.asyncio
    async def test_duplicate_registration(self, client, seeded):
        response = await client.post(
            "/api/auth/register",
            json={"email": "other@example.com", "username": "maker", "password": "secret123"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Username or email already exists"}

    @pytest.mark.asyncio
    async def test_admin_role_not_self_service(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "x@example.com", "username": "sneaky", "password": "secret123", "role": "admin"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_bad_credentials(self, client, seeded):
        response = await client.post(
            "/api/auth/login", json={"email": "maker@example.com", "password": "wrong-pass1"}
        )
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid credentials"}

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}


class TestSubmissionEndpoints:

    @pytest.mark.asyncio
    async def test_submit_app_starts_pending(self, client, seeded):
        response = await client.post(
            "/api/apps",
            headers=auth_headers(seeded.maker),
            json={
                "name": "Delta",
                "short_description": "Fourth app",
                "full_description": "A fourth app",
                "category": "Tools",
                "platform": "Web",
                "features": ["Fast", " ", "Small"],
            },
        )
        assert response.status_code == 201
        assert response.json()["app"]["status"] == "pending"

        listing = await client.get("/api/apps")
        assert "Delta" not in [a["name"] for a in listing.json()["apps"]]

        pending = await client.get("/api/apps", params={"status": "pending"})
        assert [a["name"] for a in pending.json()["apps"]] == ["Delta"]

        detail = await client.get(f"/api/apps/{response.json()['app']['uuid']}")
        assert detail.json()["features"] == ["Fast", "Small"]

    @pytest.mark.asyncio
    async def test_submit_requires_auth(self, client):
        response = await client.post("/api/apps", json={"name": "x"})
        assert response.status_code in (400, 401)

    @pytest.mark.asyncio
    async def test_delete_permissions(self, client, seeded):
        url = f"/api/apps/{seeded.app_a.id}"

        assert (await client.delete(url)).status_code == 401
        forbidden = await client.delete(url, headers=auth_headers(seeded.rival))
        assert forbidden.status_code == 403

        assert (await client.delete("/api/apps/4040", headers=auth_headers(seeded.rival))).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_cascades(self, client, seeded, session_factory):
        await client.post(f"/api/apps/{seeded.app_a.id}/like")
        await client.post(f"/api/apps/{seeded.app_a.id}/nominate")
        await client.post(f"/api/battles/{seeded.battle.id}/vote", json={"app_id": seeded.app_b.id})

        response = await client.delete(f"/api/apps/{seeded.app_a.id}", headers=auth_headers(seeded.maker))
        assert response.status_code == 200

        assert await count(session_factory, Submission, id=seeded.app_a.id) == 0
        assert await count(session_factory, Like) == 0
        assert await count(session_factory, Nomination) == 0
        # Battles the app fought in go too, and their votes with them
        assert await count(session_factory, Battle) == 0
        assert await count(session_factory, Vote) == 0

    @pytest.mark.asyncio
    async def test_admin_can_delete(self, client, seeded):
        response = await client.delete(f"/api/apps/{seeded.app_c.id}", headers=auth_headers(seeded.admin))
        assert response.status_code == 200


class TestBattleAdministration:

    @pytest.mark.asyncio
    async def test_create_requires_admin(self, client, seeded):
        body = {"app_a_id": seeded.app_a.id, "app_b_id": seeded.app_c.id, "battle_date": "2026-01-01"}
        response = await client.post("/api/battles", json=body, headers=auth_headers(seeded.maker))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_lifecycle(self, client, seeded):
        admin = auth_headers(seeded.admin)
        body = {"app_a_id": seeded.app_a.uuid, "app_b_id": seeded.app_c.id, "battle_date": "2026-01-01"}
        created = await client.post("/api/battles", json=body, headers=admin)
        assert created.status_code == 201
        battle_id = created.json()["id"]
        assert created.json()["status"] == "upcoming"

        closed = await client.post(f"/api/battles/{battle_id}/vote", json={"app_id": seeded.app_c.id})
        assert closed.status_code == 400

        await client.patch(f"/api/battles/{battle_id}/status", json={"status": "active"}, headers=admin)
        await client.post(f"/api/battles/{battle_id}/vote", json={"app_id": seeded.app_c.id})

        completed = await client.patch(
            f"/api/battles/{battle_id}/status", json={"status": "completed"}, headers=admin
        )
        assert completed.json()["status"] == "completed"
        assert completed.json()["winner_id"] == seeded.app_c.id

        reopened = await client.patch(
            f"/api/battles/{battle_id}/status", json={"status": "active"}, headers=admin
        )
        assert reopened.status_code == 400

    @pytest.mark.asyncio
    async def test_same_app_twice(self, client, seeded):
        body = {"app_a_id": seeded.app_a.id, "app_b_id": seeded.app_a.uuid, "battle_date": "2026-01-01"}
        response = await client.post("/api/battles", json=body, headers=auth_headers(seeded.admin))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_tie_has_no_winner(self, client, seeded):
        response = await client.patch(
            f"/api/battles/{seeded.battle.id}/status",
            json={"status": "completed"},
            headers=auth_headers(seeded.admin),
        )
        assert response.json()["winner_id"] is None

    @pytest.mark.asyncio
    async def test_explicit_winner_must_be_a_side(self, client, seeded):
        response = await client.patch(
            f"/api/battles/{seeded.battle.id}/status",
            json={"status": "completed", "winner_id": seeded.app_c.id},
            headers=auth_headers(seeded.admin),
        )
        assert response.status_code == 400


class TestCollaborationEndpoints:

    @pytest.mark.asyncio
    async def test_post_interest_review(self, client, seeded):
        created = await client.post(
            "/api/collaboration/posts",
            headers=auth_headers(seeded.maker),
            json={
                "title": "Need a backend dev",
                "description": "Help wanted",
                "project_stage": "mvp",
                "collaboration_type": "developer",
                "skills_needed": "Python",
                "project_category": "Tools",
            },
        )
        assert created.status_code == 201
        post_id = created.json()["post"]["id"]
        assert created.json()["post"]["owner_name"] == "maker"

        own = await client.post(
            f"/api/collaboration/posts/{post_id}/interest", json={}, headers=auth_headers(seeded.maker)
        )
        assert own.status_code == 400

        interest_url = f"/api/collaboration/posts/{post_id}/interest"
        first = await client.post(interest_url, json={"message": "Me!"}, headers=auth_headers(seeded.rival))
        assert first.json() == {"message": "Interest expressed successfully"}

        dup = await client.post(interest_url, json={}, headers=auth_headers(seeded.rival))
        assert dup.status_code == 400
        assert dup.json() == {"error": "Already expressed interest in this post"}

        detail = await client.get(f"/api/collaboration/posts/{post_id}")
        assert detail.json()["interest_count"] == 1

    @pytest.mark.asyncio
    async def test_accepting_moves_post_in_progress(self, client, seeded, session_factory):
        async with session_factory() as session:
            post = await make_post(session, seeded.maker)
            await session.commit()

        await client.post(
            f"/api/collaboration/posts/{post.id}/interest", json={}, headers=auth_headers(seeded.rival)
        )
        async with session_factory() as session:
            interest = (await session.execute(select(CollaborationInterest))).scalar_one()

        url = f"/api/collaboration/posts/{post.id}/interests/{interest.id}"
        denied = await client.patch(url, json={"status": "accepted"}, headers=auth_headers(seeded.rival))
        assert denied.status_code == 403

        accepted = await client.patch(url, json={"status": "accepted"}, headers=auth_headers(seeded.maker))
        assert accepted.json()["status"] == "accepted"

        listing = await client.get("/api/collaboration/posts")
        assert listing.json()["total"] == 0

        late = await client.post(
            f"/api/collaboration/posts/{post.id}/interest", json={}, headers=auth_headers(seeded.admin)
        )
        assert late.status_code == 400

    @pytest.mark.asyncio
    async def test_interest_requires_auth(self, client, seeded):
        response = await client.post("/api/collaboration/posts/1/interest", json={})
        assert response.status_code == 401


class TestRateLimiting:

    @pytest.mark.asyncio
    async def test_exhausted_budget_gets_429(self, client):
        app.state.rate_limiter = ClientRateLimiter(max_requests=2, window_seconds=60)

        statuses = [(await client.get("/api/health")).status_code for _ in range(3)]

        assert statuses == [200, 200, 429]
        blocked = await client.get("/api/health")
        assert blocked.json() == {"error": "Too many requests, please try again later"}

    @pytest.mark.asyncio
    async def test_root_not_limited(self, client):
        app.state.rate_limiter = ClientRateLimiter(max_requests=1, window_seconds=60)

        statuses = [(await client.get("/")).status_code for _ in range(3)]
        assert statuses == [200, 200, 200]
