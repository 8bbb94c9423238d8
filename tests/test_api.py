"""Tests for the HTTP API"""

import pytest
import asyncio
import json
import random
import sys
import os
import uuid
from collections import OrderedDict
from types import SimpleNamespace

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from fastapi.testclient import TestClient

from fugazzi.main import app
from fugazzi.api.routes import feed as feed_routes
from fugazzi.api.routes import rounds
from fugazzi.services.balance_store import InMemoryBalanceRepository
from fugazzi.services.transaction_feed import TransactionFeedSimulator

API = "/api/v1"


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def new_round(client, player=None):
    player = player or uuid.uuid4().hex
    response = client.post(f"{API}/rounds/", json={"player": player})
    assert response.status_code == 200
    return player, response.json()


def find_gem(session_id, fake, max_cost=None):
    """Index of a gem with the given authenticity, looked up server-side."""
    machine = rounds._sessions[session_id].machine
    for i, gem in enumerate(machine.items):
        if gem.is_fake == fake and (max_cost is None or gem.base_cost <= max_cost):
            return i, gem
    return None, None


class TestHealth:
    """Tests for info endpoints."""

    def test_root_and_health(self, client):
        assert client.get("/").json()["name"] == "Fugazzi"
        assert client.get("/health").json() == {"status": "healthy"}


class TestRounds:
    """Tests for round endpoints."""

    def test_create_round(self, client):
        """Test a new player starts with seven gems and 200."""
        _, state = new_round(client)
        assert len(state["items"]) == 7
        assert state["balance"] == 200
        assert state["balance_label"] == "$200.00"
        assert state["phase"] == "active"
        assert state["is_over"] is False
        for item in state["items"]:
            assert "is_fake" not in item
            assert item["price_label"].startswith("$")

    def test_create_round_without_body(self, client):
        """Test the player is optional."""
        response = client.post(f"{API}/rounds/")
        assert response.status_code == 200
        assert len(response.json()["items"]) == 7

    def test_unknown_round(self, client):
        """Test unknown session ids are 404."""
        assert client.get(f"{API}/rounds/nope").status_code == 404
        assert client.post(f"{API}/rounds/nope/select/0").status_code == 404

    def test_select_and_cancel(self, client):
        """Test selection round-trip."""
        _, state = new_round(client)
        session_id = state["session_id"]
        body = client.post(f"{API}/rounds/{session_id}/select/0").json()
        assert body["result"]["outcome"] == "selected"
        assert body["round"]["selected_index"] == 0
        assert body["round"]["phase"] == "item_selected"

        body = client.post(f"{API}/rounds/{session_id}/cancel").json()
        assert body["result"]["outcome"] == "cancelled"
        assert body["round"]["selected_index"] is None

    def test_stale_index_is_noop(self, client):
        """Test an out-of-range index does nothing."""
        _, state = new_round(client)
        body = client.post(f"{API}/rounds/{state['session_id']}/select/42").json()
        assert body["result"]["outcome"] == "invalid_selection"
        assert body["round"]["balance"] == 200

    def test_correct_call_persists_balance(self, client):
        """Test a correct call changes the balance and a new round reloads it."""
        player, state = new_round(client)
        session_id = state["session_id"]

        index, gem = find_gem(session_id, fake=False, max_cost=200)
        action = "confirm-real"
        if index is None:
            index, gem = find_gem(session_id, fake=True, max_cost=200)
            action = "confirm-fake"

        client.post(f"{API}/rounds/{session_id}/select/{index}")
        body = client.post(f"{API}/rounds/{session_id}/{action}/{index}").json()
        assert body["result"]["flash"] == "success"
        assert len(body["round"]["items"]) == 6
        balance = body["round"]["balance"]
        assert balance == 200 + body["result"]["balance_delta"]

        _, reloaded = new_round(client, player)
        assert reloaded["balance"] == balance

    def test_wrong_call_and_restart(self, client):
        """Test a wrong call ends the game and restart keeps the balance."""
        _, state = new_round(client)
        session_id = state["session_id"]

        index, gem = find_gem(session_id, fake=True, max_cost=200)
        action = "confirm-real"
        if index is None:
            index, gem = find_gem(session_id, fake=False, max_cost=200)
            action = "confirm-fake"

        client.post(f"{API}/rounds/{session_id}/select/{index}")
        body = client.post(f"{API}/rounds/{session_id}/{action}/{index}").json()
        assert body["result"]["outcome"] == "wrong_call"
        assert body["round"]["is_over"] is True
        assert body["round"]["flash"] == "fail"
        assert len(body["round"]["items"]) == 7
        balance = body["round"]["balance"]
        assert balance == 200 - gem.base_cost

        body = client.post(f"{API}/rounds/{session_id}/restart").json()
        assert body["round"]["is_over"] is False
        assert body["round"]["balance"] == balance
        assert len(body["round"]["items"]) == 7

    def test_reset_balance(self, client):
        """Test reset restores and persists the starting balance."""
        player, state = new_round(client)
        session_id = state["session_id"]
        rounds._sessions[session_id].machine.round.balance = 13

        body = client.post(f"{API}/rounds/{session_id}/reset-balance").json()
        assert body["result"]["outcome"] == "balance_reset"
        assert body["round"]["balance"] == 200

        _, reloaded = new_round(client, player)
        assert reloaded["balance"] == 200

    def test_reroll(self, client):
        """Test reroll returns a fresh seven."""
        _, state = new_round(client)
        body = client.post(f"{API}/rounds/{state['session_id']}/reroll").json()
        assert body["result"]["outcome"] == "rerolled"
        assert len(body["round"]["items"]) == 7


class TestFeedAndTiers:
    """Tests for the feed and tier endpoints."""

    def test_feed(self, client):
        """Test the feed is running and bounded."""
        body = client.get(f"{API}/feed/").json()
        assert body["running"] is True
        assert 10 <= len(body["transactions"]) <= 20
        record = body["transactions"][0]
        assert record["amount"] > 0
        assert set(record) == {"id", "username", "amount", "is_win", "timestamp"}

    def test_feed_stops_on_shutdown(self):
        """Test leaving the app lifespan stops the feed."""
        with TestClient(app):
            feed = app.state.feed
            assert feed.running
        assert not feed.running

    def test_tiers(self, client):
        """Test the tier table lists every tier with its color."""
        body = client.get(f"{API}/tiers/").json()
        assert [t["tier"] for t in body] == ["low", "medium", "high", "jackpot", "diamond"]
        assert body[0]["color"] == "#4ade80"
        assert body[3]["fugazzi_call_ev"] == pytest.approx(0.3)


class FakeStreamRequest:
    """Just enough of a Request for the stream route."""

    def __init__(self, feed):
        self.app = SimpleNamespace(state=SimpleNamespace(feed=feed))
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


class TestFeedStream:
    """Tests for the Server-Sent Events endpoint."""

    def test_each_subscriber_gets_one_event_per_record(self):
        """Test a pushed record reaches every open stream as one SSE frame."""
        async def scenario():
            feed = TransactionFeedSimulator(rng=random.Random(5))
            request = FakeStreamRequest(feed)
            first = await feed_routes.stream_feed(request)
            second = await feed_routes.stream_feed(request)

            pending = [
                asyncio.ensure_future(first.body_iterator.__anext__()),
                asyncio.ensure_future(second.body_iterator.__anext__()),
            ]
            for _ in range(3):
                await asyncio.sleep(0)
            subscribed = len(feed._subscribers)

            record = feed.generate_transaction()
            feed.push(record)
            chunks = await asyncio.wait_for(asyncio.gather(*pending), timeout=1.0)

            # one stream is closed by the server, the other by the client leaving
            await first.body_iterator.aclose()
            request.disconnected = True
            with pytest.raises(StopAsyncIteration):
                await second.body_iterator.__anext__()
            return first, record, subscribed, chunks, feed

        response, record, subscribed, chunks, feed = asyncio.run(scenario())
        assert response.media_type == "text/event-stream"
        assert subscribed == 2
        for chunk in chunks:
            assert chunk.startswith("data: ")
            assert chunk.endswith("\n\n")
            assert json.loads(chunk[len("data: "):]) == record.to_dict()
        assert feed._subscribers == []


class TestSessionCap:
    """Tests for bounding the in-memory session table."""

    def make_session(self, session_id):
        return rounds.GameSession(
            id=session_id, balance_key="gameBalance", machine=rounds.RoundStateMachine()
        )

    def test_oldest_session_is_evicted(self, monkeypatch):
        """Test sessions past the cap drop the oldest first."""
        monkeypatch.setattr(rounds, "_sessions", OrderedDict())
        for session_id in ("a", "b", "c"):
            rounds._remember(self.make_session(session_id), max_sessions=2)
        assert list(rounds._sessions) == ["b", "c"]

    def test_evicted_round_is_not_found(self, client, monkeypatch):
        """Test an evicted round answers 404."""
        monkeypatch.setattr(rounds, "_sessions", OrderedDict())
        _, state = new_round(client)
        for session_id in ("x", "y"):
            rounds._remember(self.make_session(session_id), max_sessions=2)
        assert client.get(f"{API}/rounds/{state['session_id']}").status_code == 404


class TestBalanceDependency:
    """Tests for injecting the balance repository."""

    def test_routes_use_the_injected_repository(self, client):
        """Test rounds load from and save to the repository the dependency returns."""
        repo = InMemoryBalanceRepository()
        player = uuid.uuid4().hex
        asyncio.run(repo.save(f"gameBalance:{player}", 77))

        app.dependency_overrides[rounds.get_balances] = lambda: repo
        try:
            _, state = new_round(client, player)
            assert state["balance"] == 77
            client.post(f"{API}/rounds/{state['session_id']}/reset-balance")
        finally:
            app.dependency_overrides.clear()

        assert asyncio.run(repo.load(f"gameBalance:{player}", 0)) == 200


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
