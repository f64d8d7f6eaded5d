# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from session_timer.services.live_activity import InMemoryActivityModule, LiveActivityService
from session_timer.services.notifications import NotificationService


class TestNotificationService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.service = NotificationService(heading="Workout in Progress")
        self.events: list[str] = []
        self.subscription = self.service.set_response_handlers(
            lambda: self.events.append("pause"),
            lambda: self.events.append("resume"),
            lambda: self.events.append("tap"),
        )

    async def test_show_updates_in_place(self) -> None:
        start = datetime(2026, 3, 2, 9, 5, tzinfo=timezone.utc)
        await self.service.show("Push Day", "0:01", False, "9:05 AM", start)
        await self.service.show("Push Day", "0:02", True, "9:05 AM", start)
        current = self.service.current
        self.assertEqual(current.formatted_elapsed_time, "0:02")
        self.assertTrue(current.is_paused)
        self.assertEqual(current.identifier, "workout-notification")
        self.assertEqual(current.heading, "Workout in Progress")
        self.assertEqual(current.body, "⏸️ Push Day")
        self.assertEqual(current.chronometer_base, start)
        self.assertEqual(current.data["screen"], "workout-session")
        self.assertEqual(self.service.category_actions, ["pause", "resume"])
        self.assertEqual(self.service.shown_count, 2)

    async def test_category_actions_available_before_first_show(self) -> None:
        self.assertEqual(self.service.category_actions, ["pause", "resume"])

    async def test_dismiss_is_idempotent(self) -> None:
        await self.service.dismiss()
        await self.service.show("Push Day", "0:01", False, "")
        await self.service.dismiss()
        await self.service.dismiss()
        self.assertIsNone(self.service.current)

    async def test_action_routing(self) -> None:
        self.assertTrue(self.service.dispatch_response("pause"))
        self.assertTrue(self.service.dispatch_response("resume"))
        self.assertTrue(self.service.dispatch_response("default", {"screen": "workout-session"}))
        self.assertEqual(self.events, ["pause", "resume", "tap"])

    async def test_tap_for_other_screen_ignored(self) -> None:
        self.assertFalse(self.service.dispatch_response("default", {"screen": "nutrition"}))
        self.assertFalse(self.service.dispatch_response("default"))
        self.assertFalse(self.service.dispatch_response("snooze"))
        self.assertEqual(self.events, [])

    async def test_removed_subscription_stops_routing(self) -> None:
        self.subscription.remove()
        self.subscription.remove()
        self.assertFalse(self.service.dispatch_response("pause"))
        self.assertEqual(self.events, [])


class _BrokenModule(InMemoryActivityModule):
    async def update_activity(self, activity_id, content_state):
        raise RuntimeError("ActivityKit unavailable")

    async def end_activity(self, activity_id, content_state, dismissal_policy):
        raise RuntimeError("ActivityKit unavailable")


class TestLiveActivityService(unittest.IsolatedAsyncioTestCase):
    start = datetime(2026, 3, 2, 9, 5, tzinfo=timezone.utc)

    async def test_unsupported_without_module(self) -> None:
        service = LiveActivityService()
        self.assertFalse(service.is_supported())
        self.assertIsNone(await service.start("Push Day", self.start))
        await service.update(5, False)
        await service.end(5)
        self.assertFalse(service.has_active_activity())

    async def test_start_update_end(self) -> None:
        module = InMemoryActivityModule()
        service = LiveActivityService(module)
        activity_id = await service.start("Push Day", self.start)
        self.assertIsNotNone(activity_id)
        await service.update(42, False)
        self.assertEqual(module.current.elapsed_seconds, 42)

        await service.end(60)
        record = module.activities[activity_id]
        self.assertTrue(record.ended)
        self.assertTrue(record.is_paused)
        self.assertEqual(record.elapsed_seconds, 60)
        self.assertEqual(record.dismissal_policy, "default")
        self.assertFalse(service.has_active_activity())

    async def test_update_before_start_is_noop(self) -> None:
        module = InMemoryActivityModule()
        service = LiveActivityService(module)
        await service.update(1, False)
        self.assertEqual(module.activities, {})

    async def test_module_errors_are_swallowed(self) -> None:
        service = LiveActivityService(_BrokenModule())
        await service.start("Push Day", self.start)
        with self.assertLogs("session_timer.services.live_activity", level="ERROR"):
            await service.update(1, False)
            await service.end(1)
        # The id is dropped even when ending fails
        self.assertFalse(service.has_active_activity())

    async def test_start_ends_the_activity_it_still_holds(self) -> None:
        module = InMemoryActivityModule()
        service = LiveActivityService(module)
        first = await service.start("Push Day", self.start)
        await service.update(7, False)
        with self.assertLogs("session_timer.services.live_activity", level="WARNING"):
            second = await service.start("Leg Day", self.start)
        self.assertNotEqual(first, second)
        self.assertTrue(module.activities[first].ended)
        self.assertEqual(module.activities[first].elapsed_seconds, 7)
        self.assertEqual(module.current.activity_id, second)


if __name__ == "__main__":
    unittest.main()
