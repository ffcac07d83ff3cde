from __future__ import annotations

import logging


ACTIVITY = {
    "name": "Run 5k",
    "specific": "Run",
    "measurable": "5km",
    "timebound": "30 days",
    "buddy_email": "buddy@example.com",
}


def _create_activity(client, **overrides):
    res = client.post("/api/activities", json={**ACTIVITY, **overrides})
    assert res.status_code == 201
    return res.json()


def test_health_and_test_db(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"

    db = client.get("/api/test-db")
    assert db.status_code == 200
    assert db.json() == {"database": "connected", "test": {"test": 1}}

    v = client.get("/version")
    assert v.json().get("app") == "progress-buddy-api"


def test_activity_crud(client):
    created = _create_activity(client)
    aid = created["id"]
    assert created["completed"] is False
    assert created["name"] == "Run 5k"

    lst = client.get("/api/activities").json()
    assert [a["id"] for a in lst] == [aid]

    upd = client.put(f"/api/activities/{aid}", json={**ACTIVITY, "name": "Run 10k", "completed": True})
    assert upd.status_code == 200
    assert upd.json()["name"] == "Run 10k"
    assert upd.json()["completed"] is True

    got = client.get(f"/api/activities/{aid}")
    assert got.status_code == 200 and got.json()["name"] == "Run 10k"

    assert client.delete(f"/api/activities/{aid}").status_code == 200
    assert client.get(f"/api/activities/{aid}").status_code == 404
    assert client.get("/api/activities").json() == []


def test_activity_validation_and_not_found(client):
    res = client.post("/api/activities", json={"name": "no smart fields"})
    assert res.status_code == 400
    assert "specific" in res.json()["detail"]

    assert client.put("/api/activities/999", json=ACTIVITY).status_code == 404
    assert client.delete("/api/activities/999").status_code == 404


def test_logs_routes(client):
    aid = _create_activity(client)["id"]
    r1 = client.post("/api/logs", json={"activity_id": aid, "text": "ran 2km", "metrics": {"km": 2}})
    assert r1.status_code == 201
    r2 = client.post("/api/logs", json={"activity_id": aid, "text": "ran 3km"})
    assert r2.status_code == 201

    items = client.get(f"/api/logs/activity/{aid}").json()
    assert [l["id"] for l in items] == [r2.json()["id"], r1.json()["id"]]

    bad = client.post("/api/logs", json={"activity_id": 999, "text": "orphan"})
    assert bad.status_code == 400
    assert len(client.get(f"/api/logs/activity/{aid}").json()) == 2


def test_goal_progress_and_completion_notification(client, caplog):
    aid = _create_activity(client)["id"]
    res = client.post(f"/api/activities/{aid}/goals", json={"target_value": 10})
    assert res.status_code == 201
    goal = res.json()
    assert goal["current_value"] == 0 and goal["achieved"] is False

    caplog.set_level(logging.INFO, logger="progress_buddy.services.notification_svc")
    p1 = client.put(f"/api/goals/{goal['id']}/progress", json={"current_value": 10})
    assert p1.status_code == 200
    assert p1.json()["achieved"] is True
    assert any("goal completed" in r.getMessage() for r in caplog.records)

    caplog.clear()
    p2 = client.put(f"/api/goals/{goal['id']}/progress", json={"current_value": 9})
    assert p2.json()["achieved"] is False
    assert not any("goal completed" in r.getMessage() for r in caplog.records)

    goals = client.get(f"/api/activities/{aid}/goals").json()
    assert goals[0]["current_value"] == 9


def test_goal_errors(client):
    assert client.post("/api/activities/999/goals", json={"target_value": 1}).status_code == 404
    assert client.put("/api/goals/999/progress", json={"current_value": 1}).status_code == 404


def test_delete_activity_cascades_via_api(client):
    aid = _create_activity(client)["id"]
    client.post("/api/logs", json={"activity_id": aid, "text": "x"})
    client.post(f"/api/activities/{aid}/goals", json={"target_value": 3})
    client.delete(f"/api/activities/{aid}")
    assert client.get(f"/api/logs/activity/{aid}").json() == []
    assert client.get(f"/api/activities/{aid}/goals").json() == []


def test_notification_stubs(client):
    for path, word in (
        ("/api/notifications/achievement", "Notification"),
        ("/api/notifications/goal-completed", "Goal completion"),
        ("/api/notifications/weekly-summary", "Weekly summary"),
    ):
        r = client.post(path, json={"activity": "Run 5k"})
        assert r.status_code == 200
        assert word in r.json()["message"]


def test_unknown_route_returns_json_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Route not found", "path": "/api/nope"}
    # a missing entity on a known route keeps its own detail
    assert client.get("/api/activities/999").json()["detail"] == "activity not found: 999"


def test_close_failure_does_not_block_shutdown(db_path, settings, caplog):
    from fastapi.testclient import TestClient
    from progress_buddy.api import create_app
    from progress_buddy.db import Store
    from progress_buddy.errors import StoreError

    class CloseFailsStore(Store):
        def close(self):
            super().close()
            raise StoreError("close failed")

    caplog.set_level(logging.ERROR, logger="progress_buddy.api")
    app = create_app(store=CloseFailsStore(db_path), settings=settings)
    with TestClient(app) as c:
        assert c.get("/api/health").status_code == 200
    assert any("error during shutdown" in r.getMessage() for r in caplog.records)
