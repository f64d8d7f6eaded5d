# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
import uuid
from unittest.mock import patch

from fastapi.testclient import TestClient

from session_timer import main
from session_timer.db.session import get_db
from session_timer.main import app

API = "/api/v1"


class _Result:
    def __init__(self, rows: list) -> None:
        self._rows = rows

    def scalars(self) -> "_Result":
        return self

    def all(self) -> list:
        return list(self._rows)

    def scalar_one_or_none(self):
        return self._rows[0] if self._rows else None


class FakeSession:
    """Just enough of AsyncSession for the workout endpoints."""

    def __init__(self) -> None:
        self.rows: list = []
        self.fail_flush = False

    def add(self, obj) -> None:
        self.rows.append(obj)

    async def flush(self) -> None:
        if self.fail_flush:
            self.rows.clear()
            raise ConnectionError("database unavailable")

    async def refresh(self, obj) -> None:
        return None

    async def execute(self, stmt) -> _Result:
        return _Result(self.rows)

    async def delete(self, obj) -> None:
        self.rows.remove(obj)


class TestSessionApi(unittest.TestCase):
    def setUp(self) -> None:
        self.db = FakeSession()

        async def override_get_db():
            yield self.db

        app.dependency_overrides[get_db] = override_get_db
        # The timer is kept in memory only; no database behind these tests
        self.no_storage = patch.object(main.settings, "timer_persistence_enabled", False)
        self.no_storage.start()
        self.client = TestClient(app)
        self.client.__enter__()

    def tearDown(self) -> None:
        self.client.__exit__(None, None, None)
        self.no_storage.stop()
        app.dependency_overrides.clear()

    def test_idle_session(self) -> None:
        resp = self.client.get(f"{API}/session")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["phase"], "idle")
        self.assertEqual(body["app_state"], "foreground")
        self.assertEqual(body["timer"]["formatted_time"], "0:00")
        self.assertFalse(body["timer"]["is_workout_active"])

    def test_start_background_and_surfaces(self) -> None:
        resp = self.client.post(f"{API}/session/start", json={"workout_name": "Push Day"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["phase"], "active_foreground")

        resp = self.client.post(f"{API}/session/start", json={"workout_name": "Again"})
        self.assertEqual(resp.status_code, 409)

        resp = self.client.get(f"{API}/session/surfaces")
        surfaces = resp.json()
        self.assertIsNone(surfaces["notification"])
        self.assertTrue(surfaces["live_activity_supported"])
        self.assertEqual(surfaces["live_activity"]["workout_name"], "Push Day")

        resp = self.client.post(f"{API}/session/lifecycle", json={"state": "background"})
        self.assertEqual(resp.json()["phase"], "active_background")

        surfaces = self.client.get(f"{API}/session/surfaces").json()
        notification = surfaces["notification"]
        self.assertEqual(notification["title"], "Push Day")
        self.assertEqual(notification["identifier"], "workout-notification")
        self.assertFalse(notification["is_paused"])
        self.assertEqual(notification["actions"], ["pause", "resume"])

        resp = self.client.post(f"{API}/session/lifecycle", json={"state": "foreground"})
        self.assertEqual(resp.json()["phase"], "active_foreground")
        surfaces = self.client.get(f"{API}/session/surfaces").json()
        self.assertIsNone(surfaces["notification"])

    def test_pause_action_from_notification(self) -> None:
        self.client.post(f"{API}/session/start", json={"workout_name": "Push Day"})
        self.client.post(f"{API}/session/lifecycle", json={"state": "background"})

        resp = self.client.post(
            f"{API}/session/notification/response", json={"action_identifier": "pause"}
        )
        self.assertTrue(resp.json()["handled"])
        session = self.client.get(f"{API}/session").json()
        self.assertFalse(session["timer"]["is_running"])
        surfaces = self.client.get(f"{API}/session/surfaces").json()
        self.assertTrue(surfaces["notification"]["is_paused"])
        self.assertTrue(surfaces["live_activity"]["is_paused"])

    def test_notification_tap_navigation(self) -> None:
        self.client.put(f"{API}/session/route", json={"route": "/nutrition"})
        tap = {"action_identifier": "default", "data": {"screen": "workout-session"}}

        resp = self.client.post(f"{API}/session/notification/response", json=tap)
        self.assertEqual(resp.json(), {"handled": True, "current_route": "/workout-session"})

        # Already there: still handled, route unchanged
        resp = self.client.post(f"{API}/session/notification/response", json=tap)
        self.assertEqual(resp.json()["current_route"], "/workout-session")

    def test_actions_without_workout_conflict(self) -> None:
        for action in ("pause", "resume", "reset", "complete"):
            with self.subTest(action=action):
                resp = self.client.post(f"{API}/session/{action}")
                self.assertEqual(resp.status_code, 409)

    def test_invalid_lifecycle_state(self) -> None:
        resp = self.client.post(f"{API}/session/lifecycle", json={"state": "suspended"})
        self.assertEqual(resp.status_code, 422)

    def test_complete_records_workout(self) -> None:
        workout_id = str(uuid.uuid4())
        self.client.post(
            f"{API}/session/start", json={"workout_name": "Leg Day", "workout_id": workout_id}
        )
        self.client.post(f"{API}/session/lifecycle", json={"state": "background"})

        resp = self.client.post(
            f"{API}/session/complete", json={"notes": "felt strong", "intensity": "vigorous"}
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["id"], workout_id)
        self.assertEqual(body["name"], "Leg Day")
        self.assertEqual(body["intensity"], "vigorous")
        self.assertGreaterEqual(body["duration_seconds"], 0)
        self.assertIsNotNone(body["formatted_duration"])
        self.assertEqual(len(self.db.rows), 1)

        session = self.client.get(f"{API}/session").json()
        self.assertEqual(session["phase"], "idle")
        surfaces = self.client.get(f"{API}/session/surfaces").json()
        self.assertIsNone(surfaces["notification"])
        self.assertIsNone(surfaces["live_activity"])

        listed = self.client.get(f"{API}/workouts").json()
        self.assertEqual([w["id"] for w in listed], [workout_id])
        resp = self.client.get(f"{API}/workouts/{workout_id}")
        self.assertEqual(resp.json()["name"], "Leg Day")
        resp = self.client.delete(f"{API}/workouts/{workout_id}")
        self.assertEqual(resp.status_code, 204)
        resp = self.client.get(f"{API}/workouts/{workout_id}")
        self.assertEqual(resp.status_code, 404)

    def test_failed_write_keeps_the_workout_active(self) -> None:
        self.client.post(f"{API}/session/start", json={"workout_name": "Leg Day"})
        self.db.fail_flush = True
        with self.assertRaises(ConnectionError):
            self.client.post(f"{API}/session/complete")

        session = self.client.get(f"{API}/session").json()
        self.assertTrue(session["timer"]["is_workout_active"])
        self.assertEqual(session["timer"]["workout_name"], "Leg Day")

        # Retry once the database is back
        self.db.fail_flush = False
        resp = self.client.post(f"{API}/session/complete")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Leg Day")
        self.assertEqual(len(self.db.rows), 1)
        self.assertFalse(self.client.get(f"{API}/session").json()["timer"]["is_workout_active"])

    def test_set_elapsed(self) -> None:
        resp = self.client.put(f"{API}/session/elapsed", json={"seconds": 90})
        self.assertEqual(resp.status_code, 409)

        self.client.post(f"{API}/session/start", json={"workout_name": "Push Day"})
        self.client.post(f"{API}/session/pause")
        resp = self.client.put(f"{API}/session/elapsed", json={"seconds": 90})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["timer"]["formatted_time"], "1:30")

        resp = self.client.put(f"{API}/session/elapsed", json={"seconds": -1})
        self.assertEqual(resp.status_code, 422)

    def test_health(self) -> None:
        resp = self.client.get(f"{API}/health")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "ok")
        self.assertFalse(body["ticking"])
        self.assertEqual(body["phase"], "idle")


if __name__ == "__main__":
    unittest.main()
