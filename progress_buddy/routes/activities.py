from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..db import Store
from ..logs import LogContext
from ..services import activity_svc, goal_svc
from .deps import get_store, to_http_error

router = APIRouter()


class ActivityBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    specific: Optional[str] = None
    measurable: Optional[str] = None
    achievable: Optional[str] = None
    relevant: Optional[str] = None
    timebound: Optional[str] = None
    buddy_email: Optional[str] = None
    completed: Optional[bool] = None


class GoalCreate(BaseModel):
    target_value: int
    target_date: Optional[str] = None  # YYYY-MM-DD


class GoalProgress(BaseModel):
    current_value: int


@router.get("/api/activities")
def api_activities_list(store: Store = Depends(get_store)):
    return store.list_activities()


@router.get("/api/activities/{activity_id}")
def api_activity_get(activity_id: int, store: Store = Depends(get_store)):
    activity = store.get_activity(activity_id)
    if activity is None:
        raise HTTPException(status_code=404, detail=f"activity not found: {activity_id}")
    return activity


@router.post("/api/activities", status_code=201)
def api_activity_create(body: ActivityBody, store: Store = Depends(get_store)):
    log = LogContext("CREATE_ACTIVITY")
    log.set_payload(body.dict())
    try:
        created = activity_svc.create_activity(store, body.dict(), log)
        log.write("OK")
        return created
    except Exception as e:
        raise to_http_error(e, log)


@router.put("/api/activities/{activity_id}")
def api_activity_update(activity_id: int, body: ActivityBody, store: Store = Depends(get_store)):
    log = LogContext("UPDATE_ACTIVITY")
    log.set_payload(body.dict())
    try:
        updated = activity_svc.update_activity(store, activity_id, body.dict(), log)
        log.write("OK")
        return updated
    except Exception as e:
        raise to_http_error(e, log)


@router.delete("/api/activities/{activity_id}")
def api_activity_delete(activity_id: int, store: Store = Depends(get_store)):
    log = LogContext("DELETE_ACTIVITY")
    try:
        activity_svc.delete_activity(store, activity_id, log)
        log.write("OK")
        return {"message": "ok"}
    except Exception as e:
        raise to_http_error(e, log)


@router.get("/api/activities/{activity_id}/goals")
def api_goals_list(activity_id: int, store: Store = Depends(get_store)):
    return store.list_goals_by_activity(activity_id)


@router.post("/api/activities/{activity_id}/goals", status_code=201)
def api_goal_create(activity_id: int, body: GoalCreate, store: Store = Depends(get_store)):
    log = LogContext("CREATE_GOAL")
    log.set_payload(body.dict())
    try:
        goal = goal_svc.create_goal(store, activity_id, body.dict(), log)
        log.write("OK")
        return goal
    except Exception as e:
        raise to_http_error(e, log)


@router.put("/api/goals/{goal_id}/progress")
def api_goal_progress(goal_id: int, body: GoalProgress, store: Store = Depends(get_store)):
    log = LogContext("UPDATE_GOAL_PROGRESS")
    log.set_payload(body.dict())
    try:
        goal = goal_svc.update_progress(store, goal_id, body.current_value, log)
        log.write("OK")
        return goal
    except Exception as e:
        raise to_http_error(e, log)
