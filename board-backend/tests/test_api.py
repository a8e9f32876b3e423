"""
End-to-end tests through the HTTP surface
"""

import asyncio

import httpx
import pytest
import pytest_asyncio

from common.database.mariadb_board import init_models
from gateway.main import create_app
from tests.conftest import make_settings


async def signup_and_login(client, member_id, nickname, password="pw1234"):
    res = await client.post("/member", json={"id": member_id, "password": password, "nickname": nickname})
    assert res.json() == {"success": True}
    res = await client.post("/member/login", json={"id": member_id, "password": password})
    body = res.json()
    assert body["success"] is True
    return {"token": body["token"]}


class TestBoardFlow:
    """Signup, login, post and reply through the API."""

    @pytest.mark.asyncio
    async def test_full_flow(self, client):
        alice = await signup_and_login(client, "alice", "앨리스")
        bob = await signup_and_login(client, "bob", "밥")

        res = await client.post("/board", json={"title": "안녕", "body": "첫 글"}, headers=alice)
        assert res.status_code == 200
        post_no = res.json()["no"]

        res = await client.get("/board", headers=bob)
        body = res.json()
        assert body["success"] is True
        assert body["cntText"] == 1
        assert body["list"][0]["no"] == post_no
        assert body["list"][0]["nickname"] == "앨리스"

        res = await client.get(f"/board/{post_no}", headers=bob)
        contents = res.json()["contents"]
        assert contents["title"] == "안녕"
        assert contents["body"] == "첫 글"

        res = await client.post(f"/board/{post_no}/reply", json={"reply": "반가워요"}, headers=bob)
        reply_no = res.json()["no"]

        res = await client.get(f"/board/{post_no}/reply", headers=alice)
        replies = res.json()["list"]
        assert [r["no"] for r in replies] == [reply_no]
        assert replies[0]["nickname"] == "밥"

        res = await client.put(f"/board/{post_no}/reply/{reply_no}", json={"reply": "수정"}, headers=bob)
        assert res.json() == {"success": True}

        res = await client.delete(f"/board/{post_no}", headers=alice)
        assert res.json() == {"success": True}

        res = await client.get(f"/board/{post_no}/reply", headers=alice)
        assert res.json() == {"success": True, "list": []}

    @pytest.mark.asyncio
    async def test_invalid_page_falls_back_to_first(self, client):
        alice = await signup_and_login(client, "alice", "앨리스")
        await client.post("/board", json={"title": "t", "body": "b"}, headers=alice)

        res = await client.get("/board", params={"page": "abc"}, headers=alice)

        assert len(res.json()["list"]) == 1


class TestFailureShape:
    """Every failure is {"success": false} with HTTP 200 by default."""

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        res = await client.get("/board")

        assert res.status_code == 200
        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_garbage_token(self, client):
        res = await client.get("/board", headers={"token": "garbage"})

        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        await signup_and_login(client, "alice", "앨리스")

        res = await client.post("/member/login", json={"id": "alice", "password": "nope"})

        assert res.status_code == 200
        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_duplicate_signup(self, client):
        await signup_and_login(client, "alice", "앨리스")

        res = await client.post("/member", json={"id": "alice", "password": "x", "nickname": "y"})

        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_non_author_update(self, client):
        alice = await signup_and_login(client, "alice", "앨리스")
        bob = await signup_and_login(client, "bob", "밥")
        res = await client.post("/board", json={"title": "t", "body": "b"}, headers=alice)
        post_no = res.json()["no"]

        res = await client.put(f"/board/{post_no}", json={"title": "x", "body": "y"}, headers=bob)

        assert res.status_code == 200
        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_malformed_body_and_path(self, client):
        alice = await signup_and_login(client, "alice", "앨리스")

        res = await client.post("/board", content="not json", headers={**alice, "content-type": "application/json"})
        assert res.json() == {"success": False}

        res = await client.get("/board/abc", headers=alice)
        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_oversized_numbers(self, client):
        alice = await signup_and_login(client, "alice", "앨리스")
        await client.post("/board", json={"title": "t", "body": "b"}, headers=alice)
        huge = "99999999999999999999999"

        res = await client.get("/board", params={"page": huge}, headers=alice)
        assert res.json() == {"success": True, "list": [], "cntText": 1}

        for method, path in [
            ("GET", f"/board/{huge}"),
            ("DELETE", f"/board/{huge}"),
            ("GET", f"/board/{huge}/reply"),
            ("DELETE", f"/board/1/reply/{huge}"),
            ("GET", "/board/0"),
        ]:
            res = await client.request(method, path, headers=alice)
            assert res.status_code == 200
            assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_healthz(self, client):
        res = await client.get("/healthz")

        assert res.json() == {"status": "ok"}


@pytest_asyncio.fixture
async def exposed_client(tmp_path):
    app = create_app(make_settings(tmp_path, expose_error_status=True))
    await init_models(app.state.engine)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
        yield c
    await app.state.engine.dispose()


class TestExposedStatus:
    """EXPOSE_ERROR_STATUS keeps the body but uses real status codes."""

    @pytest.mark.asyncio
    async def test_unauthenticated_is_401(self, exposed_client):
        res = await exposed_client.get("/board")

        assert res.status_code == 401
        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_non_author_is_403(self, exposed_client):
        alice = await signup_and_login(exposed_client, "alice", "앨리스")
        bob = await signup_and_login(exposed_client, "bob", "밥")
        res = await exposed_client.post("/board", json={"title": "t", "body": "b"}, headers=alice)
        post_no = res.json()["no"]

        res = await exposed_client.delete(f"/board/{post_no}", headers=bob)

        assert res.status_code == 403

    @pytest.mark.asyncio
    async def test_out_of_range_path_is_validation_error(self, exposed_client):
        alice = await signup_and_login(exposed_client, "alice", "앨리스")

        res = await exposed_client.get(f"/board/{2 ** 31}", headers=alice)

        assert res.status_code == 422
        assert res.json() == {"success": False}

    @pytest.mark.asyncio
    async def test_missing_post_is_404(self, exposed_client):
        alice = await signup_and_login(exposed_client, "alice", "앨리스")

        res = await exposed_client.get("/board/12345", headers=alice)

        assert res.status_code == 404


class TestRequestTimeout:

    @pytest.mark.asyncio
    async def test_slow_request_fails(self, tmp_path):
        app = create_app(make_settings(tmp_path, request_timeout_seconds=0.05))

        @app.get("/slow")
        async def slow():
            await asyncio.sleep(1)
            return {"success": True}

        async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as c:
            res = await c.get("/slow", headers={"origin": "http://front.example"})

        assert res.status_code == 200
        assert res.headers.get("access-control-allow-origin") == "*"
        assert res.json() == {"success": False}
        await app.state.engine.dispose()
