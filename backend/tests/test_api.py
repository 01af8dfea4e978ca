"""Tests for the feed and interest-picker HTTP endpoints."""
from datetime import datetime, timedelta, timezone

from tests.conftest import DEV


def _ids(events):
    return [e["id"] for e in events]


def _seed(store, make_event):
    store._events = {
        e.id: e for e in [
            make_event("mine", hours=3, creator=DEV),
            make_event("open", hours=5),
        ]
    }


class TestFeedState:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_initial_state(self, client):
        resp = client.get("/api/feed/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["user_events"] == []
        assert data["show_relevant_events"] is True
        assert data["show_found_events"] is False
        assert data["no_found_events"] is True
        assert data["selected_event"] is None

    def test_refresh(self, client, store, make_event):
        _seed(store, make_event)
        data = client.post("/api/feed/refresh").json()
        assert _ids(data["user_events"]) == ["mine"]
        assert data["user_events"][0]["user_status"] == "owner"
        assert data["user_events"][0]["past"] is False
        assert _ids(data["relevant_events"]) == ["open"]

    def test_refresh_reports_load_errors(self, client, store):
        store.failures["fetch_relevant_events"] = "offline"
        data = client.post("/api/feed/refresh").json()
        assert data["relevant_events"] == []
        assert data["load_errors"] == {"relevant_events": "offline"}


class TestSearch:
    def test_search_text_suggestions(self, client):
        client.post("/api/feed/refresh")
        data = client.put("/api/feed/search-text", json={"text": "c"}).json()
        assert [i["name"] for i in data["suggested_interests"]] == ["Coding", "Cycling"]
        assert data["show_suggested_interests"] is True
        assert data["show_relevant_events"] is False

        data = client.put("/api/feed/search-text", json={"text": ""}).json()
        assert data["suggested_interests"] == []
        assert data["show_suggested_interests"] is False

    def test_search_by_interest(self, client, store, make_event):
        _seed(store, make_event)
        resp = client.post("/api/feed/search", json={"name": "Hiking", "emoji": "🥾"})
        assert resp.status_code == 200
        data = resp.json()
        assert _ids(data["found_events"]) == ["mine", "open"]
        assert data["search_text"] == "Hiking"
        assert data["search_in_progress"] is False


class TestMembership:
    def test_join(self, client, store, make_event):
        _seed(store, make_event)
        client.post("/api/feed/refresh")
        resp = client.post("/api/feed/events/open/join")
        assert resp.status_code == 200
        data = resp.json()
        assert "open" in _ids(data["user_events"])
        assert data["relevant_events"] == []
        joined = next(e for e in data["user_events"] if e["id"] == "open")
        assert joined["user_status"] == "participant"

    def test_join_failure_is_conflict(self, client, store, make_event):
        _seed(store, make_event)
        client.post("/api/feed/refresh")
        store.failures["join"] = "permission denied"
        resp = client.post("/api/feed/events/open/join")
        assert resp.status_code == 409
        assert resp.json()["detail"]["reason"] == "permission denied"

        data = client.get("/api/feed/").json()
        assert _ids(data["user_events"]) == ["mine"]
        assert _ids(data["relevant_events"]) == ["open"]
        assert data["last_mutation_failure"]["action"] == "join"

    def test_leave(self, client, store, make_event):
        _seed(store, make_event)
        client.post("/api/feed/refresh")
        client.post("/api/feed/events/open/join")
        data = client.post("/api/feed/events/open/leave").json()
        assert "open" not in _ids(data["user_events"])

    def test_unknown_event(self, client):
        assert client.post("/api/feed/events/nope/join").status_code == 404
        assert client.post("/api/feed/events/nope/select").status_code == 404

    def test_select_and_clear(self, client, store, make_event):
        _seed(store, make_event)
        client.post("/api/feed/refresh")
        data = client.post("/api/feed/events/open/select").json()
        assert data["selected_event"]["id"] == "open"
        data = client.delete("/api/feed/selection").json()
        assert data["selected_event"] is None


class TestCreateEvent:
    def _payload(self, **overrides):
        start = datetime.now(timezone.utc) + timedelta(hours=6)
        payload = {
            "name": "Hack night",
            "description": "Bring a laptop",
            "interest": {"name": "Coding", "emoji": "💻"},
            "location": {"name": "Lab", "address": "Main st 1"},
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(hours=3)).isoformat(),
        }
        payload.update(overrides)
        return payload

    def test_create(self, client):
        resp = client.post("/api/feed/events", json=self._payload())
        assert resp.status_code == 201
        events = resp.json()["user_events"]
        assert [e["name"] for e in events] == ["Hack night"]
        assert events[0]["user_status"] == "owner"
        assert events[0]["creator"]["id"] == "dev"

    def test_end_before_start_rejected(self, client):
        start = datetime.now(timezone.utc) + timedelta(hours=6)
        resp = client.post("/api/feed/events", json=self._payload(
            end_date=(start - timedelta(hours=1)).isoformat(),
        ))
        assert resp.status_code == 422

    def test_unknown_interest_is_conflict(self, client):
        resp = client.post("/api/feed/events", json=self._payload(interest={"name": "Chess"}))
        assert resp.status_code == 409
        assert "Chess" in resp.json()["detail"]["reason"]


class TestTimeBadge:
    def test_badge(self, client, store, make_event):
        store._events = {"soon": make_event("soon", hours=3, creator=DEV)}
        client.post("/api/feed/refresh")
        resp = client.get("/api/feed/events/soon/badge", params={"tz": "UTC"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["label"] in ("2h", "3h")
        assert data["style"] == "soon"
        assert data["date"]


class TestInterestSelection:
    def test_selection_loads_taxonomy(self, client):
        data = client.get("/api/interests/selection").json()
        assert data["no_interests"] is False
        assert [e["interest"]["name"] for e in data["interests"]] == ["Hiking", "Coding", "Cycling"]
        assert all(e["selected"] is False for e in data["interests"])

    def test_toggle(self, client):
        client.get("/api/interests/selection")
        data = client.post("/api/interests/selection/Coding/toggle").json()
        selected = [e["interest"]["name"] for e in data["interests"] if e["selected"]]
        assert selected == ["Coding"]

    def test_toggle_unknown(self, client):
        client.get("/api/interests/selection")
        assert client.post("/api/interests/selection/Chess/toggle").status_code == 404

    def test_empty_taxonomy(self, client, store):
        store.failures["fetch_all_interests"] = "offline"
        data = client.get("/api/interests/selection").json()
        assert data["no_interests"] is True
        assert data["interests"] == []
