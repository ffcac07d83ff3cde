from __future__ import annotations

from ..db import Store
from ..errors import NotFoundError
from ..logs import LogContext
from .notification_svc import notify_goal_completed


def create_goal(store: Store, activity_id: int, data: dict, log: LogContext) -> dict:
    if store.get_activity(activity_id) is None:
        raise NotFoundError("activity", activity_id)
    goal_id = store.create_goal({**data, "activity_id": activity_id})
    goal = store.get_goal(goal_id)
    log.set_entity("GOAL", goal_id)
    log.set_after(goal)
    return goal


def update_progress(store: Store, goal_id: int, current_value: int, log: LogContext) -> dict:
    """Record progress and fire the goal-completed stub when achieved flips on."""
    log.set_entity("GOAL", goal_id)
    before = store.get_goal(goal_id)
    log.set_before(before)
    goal = store.update_goal_progress(goal_id, current_value)
    log.set_after(goal)

    if goal["achieved"] and not (before or {}).get("achieved"):
        activity = store.get_activity(goal["activity_id"]) or {}
        notify_goal_completed(
            {
                "goal_id": goal["id"],
                "activity_id": goal["activity_id"],
                "activity_name": activity.get("name"),
                "buddy_email": activity.get("buddy_email"),
                "current_value": goal["current_value"],
                "target_value": goal["target_value"],
            }
        )
    return goal
