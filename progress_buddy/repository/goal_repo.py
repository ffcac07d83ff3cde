from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from ..db import Store


def _to_goal(row: dict | None) -> dict | None:
    if row is None:
        return None
    row["achieved"] = bool(row["achieved"])
    return row


def _as_int(field: str, value) -> int:
    if isinstance(value, bool):
        raise ValidationError(field, f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(field, f"{field} must be an integer") from exc


def list_goals_by_activity(store: Store, activity_id: int) -> list[dict]:
    rows = store.all(
        "SELECT * FROM goals WHERE activity_id = ? ORDER BY created_at DESC, id DESC",
        (activity_id,),
    )
    return [_to_goal(r) for r in rows]


def get_goal(store: Store, goal_id: int) -> dict | None:
    return _to_goal(store.get("SELECT * FROM goals WHERE id = ?", (goal_id,)))


def create_goal(store: Store, fields: dict) -> int:
    for key in ("activity_id", "target_value"):
        if fields.get(key) is None:
            raise ValidationError(key)
    target_value = _as_int("target_value", fields["target_value"])
    res = store.run(
        "INSERT INTO goals (activity_id, target_value, target_date) VALUES (?, ?, ?)",
        (fields["activity_id"], target_value, fields.get("target_date")),
    )
    return int(res.id)


def update_goal_progress(store: Store, goal_id: int, current_value: int) -> dict:
    """Set current_value and recompute achieved in one statement.

    The comparison against target_value happens inside the UPDATE, so a
    concurrent writer can never pair a new current_value with a stale
    achieved flag. Joins the caller's transaction when one is open.
    Raises NotFoundError for an unknown goal id.
    """
    current_value = _as_int("current_value", current_value)

    def work() -> dict:
        res = store.run(
            "UPDATE goals SET current_value = ?, achieved = (? >= target_value) WHERE id = ?",
            (current_value, current_value, goal_id),
        )
        if res.changes == 0:
            raise NotFoundError("goal", goal_id)
        return get_goal(store, goal_id)

    return store.atomic(work)
