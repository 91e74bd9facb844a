"""
Integration tests for API endpoints using a SQLite test database.
"""
import json
import uuid

import pytest

from recovery_insights.core.errors import UpstreamFetchError
from recovery_insights.services.record_store import RecordStore


def _new_user(client, **extra) -> int:
    payload = {"email": f"{uuid.uuid4().hex}@example.com", "name": "Sam", **extra}
    r = client.post("/users", json=payload)
    assert r.status_code == 201
    return r.json()["id"]


def _log_urge(client, user_id, ts, intensity=5, trigger="", outcome=None):
    payload = {"intensity": intensity, "trigger": trigger, "created_at": ts}
    if outcome:
        payload["outcome"] = outcome
    r = client.post(f"/users/{user_id}/urges", json=payload)
    assert r.status_code == 201
    return r.json()


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestUsers:
    def test_create_and_get(self, client):
        user_id = _new_user(client, goal_days=30, start_date="2026-10-01")
        r = client.get(f"/users/{user_id}")
        assert r.status_code == 200
        body = r.json()
        assert body["goal_days"] == 30
        assert body["start_date"] == "2026-10-01"

    def test_email_normalized(self, client):
        email = f"{uuid.uuid4().hex}@Example.COM"
        r = client.post("/users", json={"email": email, "name": "Sam"})
        assert r.json()["email"] == email.lower()

    def test_streak_roundtrip(self, client):
        user_id = _new_user(client)
        assert client.get(f"/users/{user_id}/streak").json()["current_streak"] == 0
        r = client.patch(f"/users/{user_id}/streak", json={"current_streak": 9})
        assert r.status_code == 200
        assert r.json()["best_streak"] == 9


class TestUrges:
    def test_create_defaults(self, client):
        user_id = _new_user(client)
        body = _log_urge(client, user_id, "2026-10-19T08:15:00Z", intensity=8, trigger="Stress")
        assert body["outcome"] == "pending"
        assert body["overcome"] is False
        assert body["intensity_color"] == "#EF4444"
        assert body["created_at"].startswith("2026-10-19T08:15:00")

    def test_history_filter_and_sort(self, client):
        user_id = _new_user(client)
        _log_urge(client, user_id, "2026-10-17T08:00:00Z", intensity=3, outcome="resisted")
        _log_urge(client, user_id, "2026-10-18T08:00:00Z", intensity=9, outcome="indulged")
        _log_urge(client, user_id, "2026-10-19T08:00:00Z", intensity=5)

        body = client.get(f"/users/{user_id}/urges").json()
        assert body["total"] == 3
        assert body["overcome_count"] == 1
        assert body["success_rate"] == 33
        assert body["average_intensity"] == 5.7
        assert [u["intensity"] for u in body["items"]] == [5, 9, 3]

        body = client.get(f"/users/{user_id}/urges", params={"filter": "overcome"}).json()
        assert [u["intensity"] for u in body["items"]] == [3]
        assert body["total"] == 3

        body = client.get(f"/users/{user_id}/urges", params={"sort": "highest"}).json()
        assert [u["intensity"] for u in body["items"]] == [9, 5, 3]

    def test_today(self, client):
        user_id = _new_user(client)
        _log_urge(client, user_id, "2026-10-19T08:00:00Z")
        _log_urge(client, user_id, "2026-10-18T08:00:00Z")
        body = client.get(f"/users/{user_id}/urges/today", params={"day": "2026-10-19"}).json()
        assert body["total"] == 1
        assert len(body["items"]) == 1

    def test_resolve(self, client):
        user_id = _new_user(client)
        urge_id = _log_urge(client, user_id, "2026-10-19T08:00:00Z")["id"]
        r = client.patch(f"/users/{user_id}/urges/{urge_id}", json={"outcome": "resisted", "notes": "Went running"})
        assert r.status_code == 200
        assert r.json()["overcome"] is True
        assert r.json()["notes"] == "Went running"

    def test_patch_urge_of_other_user(self, client):
        owner = _new_user(client)
        other = _new_user(client)
        urge_id = _log_urge(client, owner, "2026-10-19T08:00:00Z")["id"]
        r = client.patch(f"/users/{other}/urges/{urge_id}", json={"outcome": "resisted"})
        assert r.status_code == 404
        assert r.json()["code"] == "URGE_NOT_FOUND"


class TestJournal:
    def test_put_get_and_update(self, client):
        user_id = _new_user(client)
        r = client.put(
            f"/users/{user_id}/journal/2026-10-19",
            json={"mood": 2, "text": "Tough", "emotions": ["tired"], "triggers": ["Work"]},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["mood_label"] == "Low"
        assert body["had_urge"] is True
        assert body["entry_type"] == "daily"

        r = client.put(f"/users/{user_id}/journal/2026-10-19", json={"mood": 4})
        assert r.json()["id"] == body["id"]
        assert r.json()["text"] == "Tough"

        r = client.get(f"/users/{user_id}/journal/2026-10-19")
        assert r.json()["mood"] == 4

    def test_legacy_content(self, client):
        user_id = _new_user(client)
        content = json.dumps({"text": "Thankful", "additional": {"entry_type": "gratitude", "gratitude_items": ["tea"]}})
        body = client.put(f"/users/{user_id}/journal/2026-10-18", json={"mood": 5, "content": content}).json()
        assert body["text"] == "Thankful"
        assert body["entry_type"] == "gratitude"
        assert body["gratitude_items"] == ["tea"]

    def test_list_with_stats(self, client):
        user_id = _new_user(client)
        client.put(f"/users/{user_id}/journal/2026-10-17", json={"mood": 2, "entry_type": "cbt"})
        client.put(f"/users/{user_id}/journal/2026-10-18", json={"mood": 5, "entry_type": "gratitude"})
        client.put(f"/users/{user_id}/journal/2026-10-19", json={"mood": 4})

        body = client.get(f"/users/{user_id}/journal").json()
        assert [e["date"] for e in body["items"]] == ["2026-10-19", "2026-10-18", "2026-10-17"]
        assert body["stats"]["total_entries"] == 3
        assert body["stats"]["entry_types_used"] == 3
        assert body["stats"]["average_mood"] == 3.7

        body = client.get(f"/users/{user_id}/journal", params={"entry_type": "cbt"}).json()
        assert [e["mood"] for e in body["items"]] == [2]

        body = client.get(f"/users/{user_id}/journal", params={"sort": "mood_high"}).json()
        assert [e["mood"] for e in body["items"]] == [5, 4, 2]


class TestInsights:
    def test_morning_pattern(self, client):
        user_id = _new_user(client)
        for ts in ("2026-10-19T08:00:00Z", "2026-10-19T08:30:00Z", "2026-10-18T14:00:00Z"):
            _log_urge(client, user_id, ts, trigger="Stress")
        r = client.get(
            f"/users/{user_id}/insights",
            params={"time_range": "week", "reference_date": "2026-10-19"},
        )
        assert r.status_code == 200
        body = r.json()
        assert body["insufficient_data"] is False
        assert body["reference_date"] == "2026-10-19"
        assert [b["label"] for b in body["urge_buckets"]] == ["Sun", "Mon"]
        insight = body["insights"][0]
        assert insight["details"]["window"] == "morning (5am-12pm)"
        assert insight["details"]["percentage"] == 67
        assert insight["confidence"] == 15
        assert body["triggers"] == [{"name": "Stress", "count": 3, "percentage": 100}]
        assert body["urge_summary"]["peak_hour"] == 8

    def test_empty_history(self, client):
        user_id = _new_user(client)
        body = client.get(f"/users/{user_id}/insights", params={"time_range": "year"}).json()
        assert body["insights"] == []
        assert body["insufficient_data"] is True
        assert body["urge_summary"]["total"] == 0
        assert body["urge_buckets"] == []

    def test_mood_week(self, client):
        user_id = _new_user(client)
        client.put(f"/users/{user_id}/journal/2026-10-19", json={"mood": 5})
        client.put(f"/users/{user_id}/journal/2026-10-14", json={"mood": 1})
        body = client.get(f"/users/{user_id}/insights/mood-week", params={"end": "2026-10-19"}).json()
        days = body["days"]
        assert len(days) == 7
        assert days[-1]["key"] == "2026-10-19"
        assert days[-1]["tier"] == "excellent"
        assert sum(1 for d in days if d["placeholder"]) == 5
        assert days[0]["tier"] is None


class TestAchievementsAndMotivation:
    def test_achievements(self, client):
        user_id = _new_user(client)
        _log_urge(client, user_id, "2026-10-19T08:00:00Z", outcome="resisted")
        client.patch(f"/users/{user_id}/streak", json={"current_streak": 3})
        body = client.get(f"/users/{user_id}/achievements").json()
        assert body["total"] == 7
        assert body["unlocked_count"] == 2
        assert [a["id"] for a in body["items"][:2]] == ["first_overcome", "three_day_streak"]

    def test_motivation(self, client):
        user_id = _new_user(client)
        client.patch(f"/users/{user_id}/streak", json={"current_streak": 7})
        body = client.get(f"/users/{user_id}/motivation").json()
        assert body["current_streak"] == 7
        assert body["milestone_message"].startswith("One week!")
        assert body["celebrate"] is True
        assert body["challenge"]["title"]
        assert body["quote"]


class TestStoreFailures:
    def _fail(self, operation):
        def boom(self, *args, **kwargs):
            raise UpstreamFetchError(operation, reason="OperationalError")
        return boom

    def test_urge_history_degrades_to_empty(self, client, monkeypatch):
        user_id = _new_user(client)
        _log_urge(client, user_id, "2026-10-19T08:00:00Z")
        monkeypatch.setattr(RecordStore, "fetch_urges", self._fail("fetch_urges"))
        r = client.get(f"/users/{user_id}/urges")
        assert r.status_code == 200
        body = r.json()
        assert body["items"] == []
        assert body["total"] == 0
        assert body["success_rate"] == 0
        assert body["failed_sources"] == ["fetch_urges"]

        r = client.get(f"/users/{user_id}/urges/today")
        assert r.status_code == 200
        assert r.json()["failed_sources"] == ["fetch_urges_today"]

    def test_journal_list_degrades_to_empty(self, client, monkeypatch):
        user_id = _new_user(client)
        client.put(f"/users/{user_id}/journal/2026-10-19", json={"mood": 4})
        monkeypatch.setattr(RecordStore, "fetch_journal_entries", self._fail("fetch_journal_entries"))
        r = client.get(f"/users/{user_id}/journal")
        assert r.status_code == 200
        body = r.json()
        assert body["items"] == []
        assert body["stats"]["total_entries"] == 0
        assert body["failed_sources"] == ["fetch_journal_entries"]

    def test_healthy_store_reports_no_failures(self, client):
        user_id = _new_user(client)
        assert client.get(f"/users/{user_id}/urges").json()["failed_sources"] == []
        assert client.get(f"/users/{user_id}/journal").json()["failed_sources"] == []
