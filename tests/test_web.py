import asyncio

from aiohttp.test_utils import TestClient, TestServer

from history.config import HistorySettings
from history.session import SessionRegistry
from history.web import create_app

COOKIE = "HISTORY_SESSION_ID"


def run_with_client(settings, logger, scenario):
    async def runner():
        app = create_app(settings, registry=SessionRegistry(), logger=logger)
        async with TestClient(TestServer(app)) as client:
            return await scenario(client)

    return asyncio.run(runner())


def test_get_keeps_contexts_newest_first(logger):
    async def scenario(client):
        for name in ("A", "B", "A", "C"):
            resp = await client.get(f"/contexts/{name}")
            assert resp.status == 200
        resp = await client.get("/history")
        return await resp.json()

    body = run_with_client(HistorySettings(max_size=4, store_dir=""), logger, scenario)

    assert [c["name"] for c in body["history"]] == ["C", "A", "B"]
    assert body["last"]["name"] == "C"
    assert body["history"][0]["uri"].endswith("/contexts/C")


def test_capacity_is_applied_per_request(logger):
    async def scenario(client):
        for name in ("A", "B", "C"):
            await client.get(f"/contexts/{name}")
        resp = await client.get("/history")
        return await resp.json()

    body = run_with_client(HistorySettings(max_size=2, store_dir=""), logger, scenario)

    assert [c["name"] for c in body["history"]] == ["C", "B"]


def test_post_is_rejected_with_405(logger):
    async def scenario(client):
        resp = await client.post("/contexts/A")
        history = await (await client.get("/history")).json()
        return resp.status, await resp.json(), history

    status, body, history = run_with_client(HistorySettings(store_dir=""), logger, scenario)

    assert status == 405
    assert "error" in body
    assert history == {"history": [], "last": None}


def test_sessions_are_isolated_by_cookie(logger):
    async def scenario(client):
        await client.get("/contexts/A")
        sid = client.session.cookie_jar.filter_cookies(client.make_url("/"))[COOKIE].value
        client.session.cookie_jar.clear()
        fresh = await (await client.get("/history")).json()
        other_sid = client.session.cookie_jar.filter_cookies(client.make_url("/"))[COOKIE].value
        return sid, other_sid, fresh

    sid, other_sid, fresh = run_with_client(HistorySettings(store_dir=""), logger, scenario)

    assert sid != other_sid
    assert fresh["history"] == []


def test_file_backed_sessions(tmp_path, logger):
    store_dir = tmp_path / "sessions"

    async def scenario(client):
        await client.get("/contexts/A")
        return await (await client.get("/history")).json()

    async def runner():
        app = create_app(HistorySettings(store_dir=str(store_dir)), logger=logger)
        async with TestClient(TestServer(app)) as client:
            return await scenario(client)

    body = asyncio.run(runner())

    assert [c["name"] for c in body["history"]] == ["A"]
    assert len(list(store_dir.glob("*.json"))) == 1


def test_unknown_route_still_sets_the_session_cookie(logger):
    async def scenario(client):
        resp = await client.get("/missing")
        return resp.status, resp.cookies

    status, cookies = run_with_client(HistorySettings(store_dir=""), logger, scenario)

    assert status == 404
    assert COOKIE in cookies
    assert len(cookies[COOKIE].value) == 32


def test_forged_session_id_is_replaced(logger):
    forged = "f" * 32

    async def scenario(client):
        resp = await client.get("/history", cookies={COOKIE: forged})
        return resp.cookies[COOKIE].value

    issued = run_with_client(HistorySettings(store_dir=""), logger, scenario)

    assert issued != forged
