from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ValidationError

if TYPE_CHECKING:
    from ..db import Store

REQUIRED_FIELDS = ("name", "specific", "measurable", "timebound")
TEXT_FIELDS = (
    "name",
    "description",
    "specific",
    "measurable",
    "achievable",
    "relevant",
    "timebound",
    "buddy_email",
)


def _to_activity(row: dict | None) -> dict | None:
    if row is None:
        return None
    row["completed"] = bool(row["completed"])
    return row


def validate_activity(fields: dict) -> None:
    for key in REQUIRED_FIELDS:
        value = fields.get(key)
        if value is None or not str(value).strip():
            raise ValidationError(key)


def list_activities(store: Store) -> list[dict]:
    rows = store.all("SELECT * FROM activities ORDER BY created_at DESC, id DESC")
    return [_to_activity(r) for r in rows]


def get_activity(store: Store, activity_id: int) -> dict | None:
    return _to_activity(store.get("SELECT * FROM activities WHERE id = ?", (activity_id,)))


def create_activity(store: Store, fields: dict) -> int:
    validate_activity(fields)
    res = store.run(
        "INSERT INTO activities (name, description, specific, measurable, achievable, relevant, timebound, buddy_email) "
        "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
        [fields.get(k) for k in TEXT_FIELDS],
    )
    return int(res.id)


def update_activity(store: Store, activity_id: int, fields: dict) -> int:
    """Rewrite every mutable field of an activity.

    ``completed`` keeps its stored value when omitted. ``updated_at`` always
    moves forward, by at least one millisecond. Returns the affected-row
    count, 0 for an unknown id.
    """
    validate_activity(fields)
    completed = fields.get("completed")
    params = [fields.get(k) for k in TEXT_FIELDS]
    params.append(None if completed is None else int(bool(completed)))
    params.append(activity_id)
    res = store.run(
        "UPDATE activities SET name = ?, description = ?, specific = ?, measurable = ?, achievable = ?, "
        "relevant = ?, timebound = ?, buddy_email = ?, completed = COALESCE(?, completed), "
        "updated_at = MAX(strftime('%Y-%m-%d %H:%M:%f', 'now'), "
        "strftime('%Y-%m-%d %H:%M:%f', updated_at, '+0.001 seconds')) "
        "WHERE id = ?",
        params,
    )
    return res.changes


def delete_activity(store: Store, activity_id: int) -> int:
    # logs and goals go with it via ON DELETE CASCADE
    return store.run("DELETE FROM activities WHERE id = ?", (activity_id,)).changes
