from __future__ import annotations

from ..db import Store
from ..errors import NotFoundError
from ..logs import LogContext


def create_activity(store: Store, data: dict, log: LogContext) -> dict:
    activity_id = store.create_activity(data)
    created = store.get_activity(activity_id)
    log.set_entity("ACTIVITY", activity_id)
    log.set_after(created)
    return created


def update_activity(store: Store, activity_id: int, data: dict, log: LogContext) -> dict:
    log.set_entity("ACTIVITY", activity_id)
    log.set_before(store.get_activity(activity_id))
    if store.update_activity(activity_id, data) == 0:
        raise NotFoundError("activity", activity_id)
    updated = store.get_activity(activity_id)
    log.set_after(updated)
    return updated


def delete_activity(store: Store, activity_id: int, log: LogContext) -> None:
    log.set_entity("ACTIVITY", activity_id)
    log.set_before(store.get_activity(activity_id))
    if store.delete_activity(activity_id) == 0:
        raise NotFoundError("activity", activity_id)
