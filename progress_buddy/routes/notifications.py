from __future__ import annotations

from fastapi import APIRouter, Body

from ..services import notification_svc

router = APIRouter()


@router.post("/api/notifications/achievement")
def api_notify_achievement(payload: dict = Body(default={})):
    return {"message": notification_svc.notify_achievement(payload)}


@router.post("/api/notifications/goal-completed")
def api_notify_goal_completed(payload: dict = Body(default={})):
    return {"message": notification_svc.notify_goal_completed(payload)}


@router.post("/api/notifications/weekly-summary")
def api_notify_weekly_summary(payload: dict = Body(default={})):
    return {"message": notification_svc.notify_weekly_summary(payload)}
