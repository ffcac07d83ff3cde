from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..errors import ValidationError

if TYPE_CHECKING:
    from ..db import Store


def _encode_metrics(metrics: Any) -> str | None:
    """Metrics are stored as text; structured payloads are JSON-encoded."""
    if metrics is None or isinstance(metrics, str):
        return metrics
    return json.dumps(metrics, ensure_ascii=False)


def _decode_metrics(metrics: str | None) -> Any:
    # only JSON objects/arrays are decoded; plain text comes back as written
    if not metrics or metrics[0] not in "{[":
        return metrics
    try:
        return json.loads(metrics)
    except ValueError:
        return metrics


def _to_log(row: dict) -> dict:
    row["metrics"] = _decode_metrics(row["metrics"])
    return row


def list_logs_by_activity(store: Store, activity_id: int) -> list[dict]:
    rows = store.all(
        "SELECT * FROM logs WHERE activity_id = ? ORDER BY created_at DESC, id DESC",
        (activity_id,),
    )
    return [_to_log(r) for r in rows]


def create_log(store: Store, fields: dict) -> int:
    if fields.get("activity_id") is None:
        raise ValidationError("activity_id")
    text = fields.get("text")
    if text is None or not str(text).strip():
        raise ValidationError("text")
    res = store.run(
        "INSERT INTO logs (activity_id, text, metrics) VALUES (?, ?, ?)",
        (fields["activity_id"], text, _encode_metrics(fields.get("metrics"))),
    )
    return int(res.id)
